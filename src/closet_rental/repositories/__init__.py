"""Repositories for data access."""

from closet_rental.repositories.clothing_repo import ClothingItemRepo
from closet_rental.repositories.customer_repo import CustomerRepo
from closet_rental.repositories.mappers import (
    customer_from_row,
    customer_to_record,
    item_from_row,
    item_to_record,
    like_pattern,
    line_from_row,
    rental_from_row,
    rental_to_record,
)

__all__ = [
    "ClothingItemRepo",
    "CustomerRepo",
    "customer_from_row",
    "customer_to_record",
    "item_from_row",
    "item_to_record",
    "like_pattern",
    "line_from_row",
    "rental_from_row",
    "rental_to_record",
]
