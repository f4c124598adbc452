"""
Mage Packager - Magento 扩展打包工具

Packs a Magento Connect style module directory into a .tgz package with package.xml.
"""

__version__ = "1.0.0"
__license__ = "MIT"

from .config.schema import PackageDescriptor
from .build.builder import Packager

__all__ = ["PackageDescriptor", "Packager", "__version__"]
