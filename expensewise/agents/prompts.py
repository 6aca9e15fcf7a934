"""
Prompt templates for the categorization agent.

The prompt is a pure function of (raw name, taxonomy): same input,
same prompt. It names every output field explicitly because the
normalizer reads those exact keys first.
"""

from typing import Mapping, Sequence

from expensewise.models.taxonomy import CATEGORY_SUBCATEGORIES, EXPENSE_CATEGORIES

RESPONSE_TEMPLATE = (
    '{"cleanedName": "cleaned name here", '
    '"suggestedCategory": "category here", '
    '"suggestedSubcategory": "subcategory here", '
    '"brandColor": "#123456", '
    '"brandAccentColor": "#654321", '
    '"brandLogoUrl": "https://logo.clearbit.com/example.com", '
    '"imageKeyword": "keyword here", '
    '"imageUrl": "https://images.unsplash.com/photo-id", '
    '"confidence": "high"}'
)

EXAMPLES = (
    ("AMZN*AB123CD456", "Amazon", "Shopping", "Online Shopping"),
    ("Apple MacBook Pro 16", 'MacBook Pro 16"', "Technology & Electronics", "Computers & Laptops"),
    ("IKEA KALLAX Shelf", "KALLAX Shelf", "Housing", "Furniture"),
    ("Tesla Model 3", "Tesla Model 3", "Transportation", "Vehicle Purchase"),
)


def format_category_guide(
    categories: Sequence[str],
    subcategories: Mapping[str, Sequence[str]],
) -> str:
    """One line per category: "Category: Sub A, Sub B"."""
    lines = []
    for category in categories:
        subs = subcategories.get(category) or ()
        lines.append(f"- {category}: {', '.join(subs) if subs else 'Other'}")
    return "\n".join(lines)


def build_categorization_prompt(
    raw_name: str,
    categories: Sequence[str] = EXPENSE_CATEGORIES,
    subcategories: Mapping[str, Sequence[str]] = CATEGORY_SUBCATEGORIES,
) -> str:
    """
    Build the categorization prompt for a raw expense name.

    The raw name is embedded verbatim.
    """
    category_guide = format_category_guide(categories, subcategories)
    examples = "\n".join(
        f'- "{raw}" → cleaned: "{cleaned}", category: "{category}", subcategory: "{sub}"'
        for raw, cleaned, category, sub in EXAMPLES
    )

    return f"""You are an AI assistant that helps clean and categorize expense names.

Given the raw expense name: "{raw_name}"

Please provide:
1. A cleaned, human-readable version of the name (remove transaction IDs, clean up merchant names, etc.)
2. The most appropriate category from this list: {', '.join(categories)}
3. The best matching subcategory for that category.
4. Two brand colors that match the expense: a primary hex color and a complementary accent hex color. Always include the leading "#".
5. A logo URL for the brand if you can determine it. Prefer https://logo.clearbit.com/<domain> when a clear domain is known. Use null if unsure.
6. A concise image search keyword (1-3 words, no special characters) that best represents the expense.
7. A high-quality illustrative product image URL (square preferred). Prefer direct HTTPS links from trusted CDNs (e.g., https://images.unsplash.com/ or official brand CDNs). Use null if unsure.
8. Your confidence level (high, medium, or low)

Category system:
{category_guide}

Examples:
{examples}

Respond ONLY with a JSON object in this exact format (no markdown, no extra text):
{RESPONSE_TEMPLATE}"""
