# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Company domain package: access policy for company-owned resources."""

from src.domains.company.service import CompanyAccessService, CompanyNotFoundError

__all__ = [
    "CompanyAccessService",
    "CompanyNotFoundError",
]
