"""Category element scanners."""

from .base import CATEGORY_PRECEDENCE, ElementScanner, FeatureCategory
from .button_scanner import ButtonScanner
from .input_scanner import InputScanner
from .navigation_scanner import NavigationScanner
from .component_scanner import ComponentScanner

__all__ = [
    "CATEGORY_PRECEDENCE",
    "ElementScanner",
    "FeatureCategory",
    "ButtonScanner",
    "InputScanner",
    "NavigationScanner",
    "ComponentScanner",
]
