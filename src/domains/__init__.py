# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer.

Domains:
    auth: Acting-user model.
    company: Company access policy.
    booking: Orders and the students enrolled against them.
"""
