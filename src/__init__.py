"""Corporate Booking core.

Order enrollment for a B2B course-booking platform: companies add students
to pending orders under a per-order lock.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "0.1.0"
