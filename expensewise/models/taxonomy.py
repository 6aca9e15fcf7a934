"""
Expense Taxonomy

The fixed category → allowed-subcategory mapping.

It is used twice:
1. To steer the model (enumerated in the categorization prompt)
2. To validate the model's answer (anything outside it is repaired)

DESIGN DECISION: The taxonomy is static data, built once at import time
and exposed read-only. Nothing mutates it at runtime.
"""

from types import MappingProxyType
from typing import Mapping, Optional

CATCH_ALL_CATEGORY = "Miscellaneous"

EXPENSE_CATEGORIES: tuple[str, ...] = (
    "Housing",
    "Transportation",
    "Food & Dining",
    "Shopping",
    "Entertainment",
    "Technology & Electronics",
    "Health & Fitness",
    "Education",
    "Personal Care",
    "Pets",
    "Travel",
    "Financial",
    "Insurance",
    "Gifts & Donations",
    "Kids & Family",
    "Business Expenses",
    "Subscriptions",
    "Utilities & Bills",
    "Savings & Investments",
    CATCH_ALL_CATEGORY,
)

CATEGORY_SUBCATEGORIES: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "Housing": (
        "Rent/Mortgage",
        "Property Tax",
        "Home Insurance",
        "Utilities",
        "Internet & Cable",
        "Home Maintenance",
        "Furniture",
        "Home Improvement",
    ),
    "Transportation": (
        "Vehicle Purchase",
        "Fuel/Gas",
        "Car Insurance",
        "Car Maintenance",
        "Public Transit",
        "Parking",
        "Ride Share",
        "Vehicle Registration",
    ),
    "Food & Dining": (
        "Groceries",
        "Restaurants",
        "Fast Food",
        "Coffee Shops",
        "Food Delivery",
        "Alcohol & Bars",
    ),
    "Shopping": (
        "Clothing",
        "Shoes",
        "Accessories",
        "Personal Items",
        "Household Supplies",
        "Online Shopping",
    ),
    "Entertainment": (
        "Streaming Services",
        "Movies & Theater",
        "Concerts & Events",
        "Gaming",
        "Hobbies",
        "Books & Magazines",
        "Sports & Recreation",
    ),
    "Technology & Electronics": (
        "Computers & Laptops",
        "Phones & Tablets",
        "Smart Home Devices",
        "Gadgets",
        "Software & Apps",
        "Electronics Accessories",
    ),
    "Health & Fitness": (
        "Doctor Visits",
        "Medications",
        "Health Insurance",
        "Gym Membership",
        "Fitness Equipment",
        "Supplements",
        "Mental Health",
    ),
    "Education": (
        "Tuition & Fees",
        "Books & Supplies",
        "Online Courses",
        "Workshops & Training",
        "Student Loans",
    ),
    "Personal Care": (
        "Hair Care",
        "Skincare",
        "Cosmetics",
        "Spa & Salon",
        "Grooming",
    ),
    "Pets": (
        "Pet Food",
        "Veterinary",
        "Pet Insurance",
        "Pet Supplies",
        "Pet Grooming",
    ),
    "Travel": (
        "Flights",
        "Hotels",
        "Vacation Rentals",
        "Travel Insurance",
        "Activities & Tours",
        "Souvenirs",
    ),
    "Financial": (
        "Bank Fees",
        "Investment Fees",
        "Credit Card Fees",
        "ATM Fees",
        "Tax Preparation",
        "Financial Advice",
    ),
    "Insurance": (
        "Life Insurance",
        "Health Insurance",
        "Car Insurance",
        "Home Insurance",
        "Other Insurance",
    ),
    "Gifts & Donations": (
        "Gifts",
        "Charity",
        "Religious Donations",
        "Crowdfunding",
    ),
    "Kids & Family": (
        "Childcare",
        "Toys",
        "School Supplies",
        "Allowance",
        "Kids Activities",
        "Diapers & Baby Supplies",
    ),
    "Business Expenses": (
        "Office Supplies",
        "Business Travel",
        "Professional Services",
        "Marketing",
        "Equipment",
        "Licenses & Permits",
    ),
    "Subscriptions": (
        "Video Streaming",
        "Music Streaming",
        "Software Subscriptions",
        "News & Media",
        "Cloud Storage",
        "Other Subscriptions",
    ),
    "Utilities & Bills": (
        "Electric",
        "Water",
        "Gas",
        "Internet",
        "Phone",
        "Trash/Recycling",
    ),
    "Savings & Investments": (
        "Emergency Fund",
        "Retirement",
        "Stocks & Bonds",
        "Real Estate",
        "Cryptocurrency",
    ),
    CATCH_ALL_CATEGORY: (
        "Other",
    ),
})

CONFIDENCE_LEVELS: tuple[str, ...] = ("high", "medium", "low")
DEFAULT_CONFIDENCE = "medium"


def is_valid_category(category: Optional[str]) -> bool:
    """Exact membership check against the category set."""
    return isinstance(category, str) and category in CATEGORY_SUBCATEGORIES


def get_subcategories(category: str) -> tuple[str, ...]:
    """Allowed subcategories for a category (empty for unknown categories)."""
    return CATEGORY_SUBCATEGORIES.get(category, ())


def is_valid_subcategory(category: str, subcategory: Optional[str]) -> bool:
    return isinstance(subcategory, str) and subcategory in get_subcategories(category)
