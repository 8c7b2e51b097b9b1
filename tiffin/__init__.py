"""
                TiffinBuddy Storefront

Customer storefront and admin panel client for a tiffin delivery
service. Talks to the remote ordering API, keeps the cart and the
session on the client, and drives everything from a terminal.

Author: Khalil_Bannouri
Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Khalil_Bannouri"
