"""
Client-side state containers: the session holder and the cart.
"""

from tiffin.state.cart import Cart, CartLine
from tiffin.state.session import AuthState

__all__ = ["AuthState", "Cart", "CartLine"]
