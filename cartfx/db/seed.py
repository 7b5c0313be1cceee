"""Demo product catalog.

Prices are stored in a base currency (USD for all demo items) and converted
on read. Used by the products router when no other catalog is supplied.
"""

from __future__ import annotations
from typing import List

from cartfx.models.product import Product

_DEMO_ROWS = [
    {
        "id": "p1",
        "name": "Wireless Headphones",
        "description": "ANC over-ear with 30h battery.",
        "price_base": 149.99,
        "image": "https://images.unsplash.com/photo-1518441902112-f0d85f4f87ac?q=80&w=1200&auto=format&fit=crop",
    },
    {
        "id": "p2",
        "name": "Smart Watch",
        "description": "AMOLED display, GPS, HRV tracking.",
        "price_base": 199.0,
        "image": "https://images.unsplash.com/photo-1518441902112-f0d85f4f87ac?q=80&w=1200&auto=format&fit=crop",
    },
    {
        "id": "p3",
        "name": "Mechanical Keyboard",
        "description": "Low-profile, hot-swappable switches.",
        "price_base": 109.0,
        "image": "https://images.unsplash.com/photo-1517336714731-489689fd1ca8?q=80&w=1200&auto=format&fit=crop",
    },
    {
        "id": "p4",
        "name": "USB-C Hub",
        "description": "8-in-1, 100W PD, HDMI 4K.",
        "price_base": 59.0,
        "image": "https://images.unsplash.com/photo-1518779578993-ec3579fee39f?q=80&w=1200&auto=format&fit=crop",
    },
    {
        "id": "p5",
        "name": "4K Webcam",
        "description": "Autofocus, dual mics, privacy shutter.",
        "price_base": 129.0,
        "image": "https://images.unsplash.com/photo-1518770660439-4636190af475?q=80&w=1200&auto=format&fit=crop",
    },
    {
        "id": "p6",
        "name": "Portable SSD 1TB",
        "description": "USB 3.2 Gen2, 1,000 MB/s.",
        "price_base": 139.0,
        "image": "https://images.unsplash.com/photo-1587202372775-98927b115591?q=80&w=1200&auto=format&fit=crop",
    },
]


def demo_products() -> List[Product]:
    return [Product(currency_base="USD", **row) for row in _DEMO_ROWS]
