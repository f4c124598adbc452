"""
测试公共夹具
"""

from datetime import datetime
from pathlib import Path

import pytest


VALID_PACKAGE_YML = """\
name: Foo_Bar
version: 1.0.0
stability: stable
license: "OSL-3.0"
channel: community
summary: "Foo Bar module"
description: "Foo Bar module long description"
notes: "First release"
authors:
    - { name: "Jane Doe", user: janedoe, email: jane.doe@example.com }
php_min_version: 5.4.0
php_max_version: 7.2.0
required_packages:
    - { name: Mage_Core_Modules, channel: community, min: 1.7.0, max: ~ }
"""


@pytest.fixture
def clock():
    """固定时钟，使清单输出可重复"""
    return lambda: datetime(2024, 1, 2, 3, 4, 5)


@pytest.fixture
def descriptor_data():
    """合法的描述数据（字典形式）"""
    return {
        'name': 'Foo_Bar',
        'version': '1.0.0',
        'stability': 'stable',
        'license': 'OSL-3.0',
        'channel': 'community',
        'summary': 'Foo Bar module',
        'description': 'Foo Bar module long description',
        'notes': 'First release',
        'authors': [
            {'name': 'Jane Doe', 'user': 'janedoe', 'email': 'jane.doe@example.com'},
        ],
        'php_min_version': '5.4.0',
        'php_max_version': '7.2.0',
        'required_packages': [
            {'name': 'Mage_Core_Modules', 'channel': 'community', 'min': '1.7.0', 'max': None},
        ],
    }


@pytest.fixture
def module_dir(tmp_path) -> Path:
    """包含 package.yml 和 app/code/local/Foo/Bar.php 的模块目录"""
    source = tmp_path / "Foo_Bar"
    (source / "app" / "code" / "local" / "Foo").mkdir(parents=True)
    (source / "app" / "code" / "local" / "Foo" / "Bar.php").write_text("<?php class Foo_Bar {}\n")
    (source / "package.yml").write_text(VALID_PACKAGE_YML)
    return source
