"""
Expensewise - Source Package

Expense tracking with AI-assisted categorization.
Users log one-time purchases, the app amortizes them into a monthly
cost, and a generative model cleans up raw expense names into a
category, subcategory and brand identity.

DESIGN PRINCIPLES:
1. AI suggests → User confirms the prefilled form
2. Untrusted model output never reaches the caller unvalidated
3. Enrichment (images, logos) never blocks categorization
4. Every step is logged with a correlation ID
"""

__version__ = "1.0.0"
__author__ = "Expensewise Team"
