from models.users import User
from models.user_sessions import UserSession
from models.orders import Order
from models.products import Product
from models.categories import Category
from models.cart_items import CartItem
from models.subscriptions import Subscription, NewsletterSubscription

__all__ = ["User", "UserSession", "Order", "Product", "Category", "CartItem",
           "Subscription", "NewsletterSubscription"]
