from .base import Base
from .user import User
from .menu.menu import Menu
from .menu.category import Category
from .menu.item import Item
from .menu.item_image import ItemImage
