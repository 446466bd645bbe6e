"""Keyword-based product type guessing for receipt item names."""

from __future__ import annotations

DEFAULT_PRODUCT_TYPE = "Electronics"

# Checked top to bottom; the first rule with a matching keyword wins.
_TYPE_KEYWORDS: list[tuple[tuple[str, ...], str]] = [
    # Electronics & computing
    (("laptop", "macbook", "notebook", "computer"), "Laptop"),
    (("phone", "iphone", "smartphone", "mobile"), "Smartphone"),
    (("tablet", "ipad"), "Tablet"),
    (("mouse", "mice"), "Computer Mouse"),
    (("keyboard",), "Keyboard"),
    (("monitor", "display", "screen"), "Monitor"),
    (("headphone", "earphone", "earbuds", "airpods"), "Audio Device"),
    (("speaker", "bluetooth"), "Speaker"),
    (("camera", "webcam"), "Camera"),
    (("watch", "smartwatch"), "Smart Watch"),
    (("cable", "charger", "adapter", "dongle"), "Accessory"),
    (("drive", "storage", "ssd", "hdd"), "Storage Device"),
    (("router", "modem", "wifi"), "Network Device"),
    # Home & appliances
    (("tv", "television"), "Television"),
    (("refrigerator", "fridge"), "Refrigerator"),
    (("microwave", "oven"), "Kitchen Appliance"),
    (("washer", "dryer", "washing"), "Laundry Appliance"),
    (("vacuum", "cleaner"), "Cleaning Appliance"),
    # Gaming
    (("xbox", "playstation", "nintendo", "console"), "Gaming Console"),
    (("controller", "gamepad"), "Gaming Controller"),
]


def classify_product_type(name: str) -> str:
    """Guess a coarse product category from a product name."""
    lowered = name.lower()
    for keywords, product_type in _TYPE_KEYWORDS:
        for keyword in keywords:
            if keyword in lowered:
                return product_type
    if "game" in lowered and ("video" in lowered or "disc" in lowered):
        return "Video Game"
    return DEFAULT_PRODUCT_TYPE
