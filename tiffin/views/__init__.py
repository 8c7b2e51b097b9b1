"""
Views: async controllers holding screen state and reporting every
outcome through the notifier.
"""

from tiffin.views.admin import AdminView, FoodForm
from tiffin.views.food_card import FoodCardState
from tiffin.views.header import Header
from tiffin.views.home import HomeView
from tiffin.views.login import LoginView
from tiffin.views.orders import OrdersView

__all__ = [
    "AdminView",
    "FoodForm",
    "FoodCardState",
    "Header",
    "HomeView",
    "LoginView",
    "OrdersView",
]
