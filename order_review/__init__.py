"""
                Accepted Orders Review Service

Review, filter, edit and report on accepted supplier orders for the
restaurant back office, backed by a REST accepted-orders store.

Author: Khalil_Bannouri
Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Khalil_Bannouri"
