"""
包描述配置单元测试

测试字段验证（快速失败）、加载器以及模板生成。
"""

import pytest
from pydantic import ValidationError

from mage_packager.config import (
    ConfigError,
    ConfigLoader,
    ConfigValidationError,
    DescriptorValidator,
    PackageDescriptor,
    Stability,
    load_config,
    validate_config,
)
from mage_packager.config.loader import DESCRIPTOR_STUB


class TestDescriptorValidator:
    """DescriptorValidator 测试"""

    def test_valid_descriptor(self, descriptor_data):
        """测试合法描述"""
        descriptor = DescriptorValidator().validate(descriptor_data)

        assert isinstance(descriptor, PackageDescriptor)
        assert descriptor.name == "Foo_Bar"
        assert descriptor.version == "1.0.0"
        assert descriptor.stability is Stability.STABLE
        assert descriptor.authors[0].user == "janedoe"
        assert descriptor.required_packages[0].min == "1.7.0"
        assert descriptor.required_packages[0].max is None

    def test_values_are_trimmed(self, descriptor_data):
        """测试字段值去除空白"""
        descriptor_data['name'] = '  Foo_Bar  '
        descriptor_data['summary'] = '\tSummary \n'

        descriptor = DescriptorValidator().validate(descriptor_data)

        assert descriptor.name == "Foo_Bar"
        assert descriptor.summary == "Summary"

    @pytest.mark.parametrize("field", [
        'name', 'stability', 'license', 'channel', 'summary',
        'description', 'authors', 'php_min_version', 'php_max_version',
    ])
    def test_missing_required_field(self, descriptor_data, field):
        """测试缺少必填字段"""
        del descriptor_data[field]

        with pytest.raises(ConfigValidationError) as exc_info:
            DescriptorValidator().validate(descriptor_data)

        assert exc_info.value.field == field
        assert field in str(exc_info.value)

    @pytest.mark.parametrize("field", ['license', 'channel', 'summary', 'description'])
    def test_blank_required_field(self, descriptor_data, field):
        """测试仅含空白的必填字段"""
        descriptor_data[field] = "   "

        with pytest.raises(ConfigValidationError) as exc_info:
            DescriptorValidator().validate(descriptor_data)

        assert exc_info.value.field == field

    @pytest.mark.parametrize("field,value", [
        ('name', 'Foo Bar'),
        ('name', 'Foo/Bar'),
        ('version', '1'),
        ('version', '1.0'),
        ('version', 'v1.0.0'),
        ('stability', 'experimental'),
        ('php_min_version', '5.4'),
        ('php_max_version', '7.2.0.1'),
    ])
    def test_pattern_mismatch(self, descriptor_data, field, value):
        """测试格式不正确的字段"""
        descriptor_data[field] = value

        with pytest.raises(ConfigValidationError) as exc_info:
            DescriptorValidator().validate(descriptor_data)

        assert exc_info.value.field == field
        assert exc_info.value.value == value

    def test_version_with_many_parts(self, descriptor_data):
        """测试多段版本号"""
        descriptor_data['version'] = '1.2.3.4'
        assert DescriptorValidator().validate(descriptor_data).version == '1.2.3.4'

    def test_blank_version_is_rejected(self, descriptor_data):
        """测试存在但为空的版本号"""
        descriptor_data['version'] = ' '

        with pytest.raises(ConfigValidationError) as exc_info:
            DescriptorValidator().validate(descriptor_data)

        assert exc_info.value.field == 'version'

    def test_optional_fields_omitted(self, descriptor_data):
        """测试省略可选字段"""
        del descriptor_data['version']
        del descriptor_data['notes']
        del descriptor_data['required_packages']

        descriptor = DescriptorValidator().validate(descriptor_data)

        assert descriptor.version is None
        assert descriptor.notes is None
        assert descriptor.required_packages == ()
        assert descriptor.package_file_name == "Foo_Bar"
        assert descriptor.archive_name == "Foo_Bar.tgz"

    def test_first_error_wins(self, descriptor_data):
        """测试多个错误时只报告第一个"""
        descriptor_data['name'] = 'bad name'
        descriptor_data['stability'] = 'experimental'
        descriptor_data['php_min_version'] = 'x'

        with pytest.raises(ConfigValidationError) as exc_info:
            DescriptorValidator().validate(descriptor_data)

        assert exc_info.value.field == 'name'
        assert len(exc_info.value.errors) == 1

    @pytest.mark.parametrize("key,value", [
        ('name', ''),
        ('user', 'jane doe'),
        ('email', 'not-an-email'),
        ('email', 'jane@example'),
    ])
    def test_invalid_author(self, descriptor_data, key, value):
        """测试不合法的作者信息"""
        descriptor_data['authors'][0][key] = value

        with pytest.raises(ConfigValidationError) as exc_info:
            DescriptorValidator().validate(descriptor_data)

        assert exc_info.value.field == f'authors[0].{key}'

    def test_email_is_case_insensitive(self, descriptor_data):
        """测试邮箱大小写不敏感"""
        descriptor_data['authors'][0]['email'] = 'Jane.Doe+Mage@Example.COM'
        descriptor = DescriptorValidator().validate(descriptor_data)
        assert descriptor.authors[0].email == 'Jane.Doe+Mage@Example.COM'

    def test_empty_authors(self, descriptor_data):
        """测试空作者列表"""
        descriptor_data['authors'] = []

        with pytest.raises(ConfigValidationError) as exc_info:
            DescriptorValidator().validate(descriptor_data)

        assert exc_info.value.field == 'authors'

    def test_required_package_missing_channel(self, descriptor_data):
        """测试依赖包缺少渠道"""
        descriptor_data['required_packages'] = [{'name': 'Other_Module'}]

        with pytest.raises(ConfigValidationError) as exc_info:
            DescriptorValidator().validate(descriptor_data)

        assert exc_info.value.field == 'required_packages[0].channel'

    def test_required_package_versions(self, descriptor_data):
        """测试依赖包版本可选且空白视为未设置"""
        descriptor_data['required_packages'] = [
            {'name': 'A_Module', 'channel': 'community', 'min': '  ', 'max': '2.0'},
        ]

        descriptor = DescriptorValidator().validate(descriptor_data)

        assert descriptor.required_packages[0].min is None
        assert descriptor.required_packages[0].max == '2.0'

    def test_required_package_invalid_version(self, descriptor_data):
        """测试依赖包版本格式不正确"""
        descriptor_data['required_packages'][0]['max'] = '2.x'

        with pytest.raises(ConfigValidationError) as exc_info:
            DescriptorValidator().validate(descriptor_data)

        assert exc_info.value.field == 'required_packages[0].max'

    def test_numeric_scalars_are_stringified(self, descriptor_data):
        """测试 YAML 数字值转换为字符串"""
        descriptor_data['required_packages'][0]['min'] = 1.7

        descriptor = DescriptorValidator().validate(descriptor_data)

        assert descriptor.required_packages[0].min == '1.7'

    @pytest.mark.parametrize("data", [None, {}, []])
    def test_empty_config(self, data):
        """测试空配置"""
        with pytest.raises(ConfigError):
            DescriptorValidator().validate(data)

    def test_non_mapping_config(self):
        """测试根级别不是字典"""
        with pytest.raises(ConfigError):
            DescriptorValidator().validate(["name"])

    def test_descriptor_is_immutable(self, descriptor_data):
        """测试包描述不可修改"""
        descriptor = DescriptorValidator().validate(descriptor_data)

        with pytest.raises(ValidationError):
            descriptor.name = "Other"


class TestConfigLoader:
    """ConfigLoader 测试"""

    def test_load_from_file(self, module_dir):
        """测试从文件加载"""
        descriptor = load_config(module_dir / "package.yml")

        assert descriptor.name == "Foo_Bar"
        assert descriptor.version == "1.0.0"
        assert descriptor.notes == "First release"
        assert descriptor.required_packages[0].max is None

    def test_load_from_directory(self, module_dir):
        """测试从目录加载"""
        descriptor = ConfigLoader().load_from_directory(module_dir)
        assert descriptor.archive_name == "Foo_Bar-1.0.0.tgz"

    def test_load_missing_file(self, tmp_path):
        """测试文件不存在"""
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path / "package.yml")

        assert "package.yml" in str(exc_info.value)

    def test_load_invalid_yaml(self, tmp_path):
        """测试 YAML 语法错误"""
        config_path = tmp_path / "package.yml"
        config_path.write_text("name: [unclosed\n")

        with pytest.raises(ConfigError):
            load_config(config_path)

    def test_load_empty_file(self, tmp_path):
        """测试空文件"""
        config_path = tmp_path / "package.yml"
        config_path.write_text("")

        with pytest.raises(ConfigError):
            load_config(config_path)

    def test_load_wrong_extension(self, tmp_path):
        """测试文件扩展名不正确"""
        config_path = tmp_path / "package.json"
        config_path.write_text("{}")

        with pytest.raises(ConfigError):
            load_config(config_path)

    def test_validate_config_returns_errors(self, module_dir):
        """测试验证函数返回错误列表"""
        config_path = module_dir / "package.yml"
        config_path.write_text(config_path.read_text().replace("stability: stable", "stability: experimental"))

        errors = validate_config(config_path)

        assert len(errors) == 1
        assert errors[0]['loc'] == 'stability'
        assert errors[0]['input'] == 'experimental'

    def test_validate_config_valid(self, module_dir):
        """测试验证通过"""
        assert validate_config(module_dir / "package.yml") == []

    def test_write_stub(self, tmp_path):
        """测试生成模板"""
        config_path = ConfigLoader().write_stub(tmp_path)

        assert config_path == tmp_path.resolve() / "package.yml"
        assert config_path.read_text() == DESCRIPTOR_STUB

    def test_stub_is_valid_descriptor(self, tmp_path):
        """测试生成的模板本身可以通过验证"""
        config_path = ConfigLoader().write_stub(tmp_path)

        descriptor = load_config(config_path)

        assert descriptor.name == "Module_Module"
        assert descriptor.required_packages[0].min is None
        assert descriptor.required_packages[0].max is None

    def test_write_stub_missing_directory(self, tmp_path):
        """测试目标目录不存在"""
        with pytest.raises(ConfigError):
            ConfigLoader().write_stub(tmp_path / "missing")
