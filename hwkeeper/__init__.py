"""Hardware inventory tracking from purchase receipts."""

from .config import KeeperConfig, load_config
from .db import Product, ProductCreate, ProductDB, products_from_result
from .models import (
    ExtractedProductInfo,
    ProcessingStatus,
    ReceiptProcessingResult,
    ReceiptText,
)
from .ocr import OcrError, OcrProvider, create_provider
from .parsing import STRATEGIES, classify_product_type, parse_products
from .processor import ReceiptProcessor, create_processor, process_receipt

__all__ = [
    "ExtractedProductInfo",
    "ProcessingStatus",
    "ReceiptProcessingResult",
    "ReceiptText",
    "OcrError",
    "OcrProvider",
    "create_provider",
    "STRATEGIES",
    "classify_product_type",
    "parse_products",
    "ReceiptProcessor",
    "create_processor",
    "process_receipt",
    "Product",
    "ProductCreate",
    "ProductDB",
    "products_from_result",
    "KeeperConfig",
    "load_config",
]
