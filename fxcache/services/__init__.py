# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Services package."""
from fxcache.services import conversion_service, rate_cache, rate_provider

__all__ = [
    "conversion_service",
    "rate_cache",
    "rate_provider",
]
