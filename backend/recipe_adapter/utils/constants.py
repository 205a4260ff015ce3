"""
Centralized constants and configuration data.

This module contains all hardcoded databases, keyword tables, and display
strings used by the adaptation engine. Centralizing these values makes them
easy to modify and maintain.

Categories:
- Diet key aliases
- Ingredient substitution database (base + custom rules)
- FODMAP heuristic triggers
- Review option triggers
- Dietary / allergy selection options
- Audit trail formatting
"""

from typing import Dict, List, Tuple

# ==============================================================================
# DIET KEYS
# ==============================================================================

# Internal keys a substitution rule may carry a suggestion for
DIET_KEYS: Tuple[str, ...] = (
    "vegan",
    "vegetarian",
    "keto",
    "paleo",
    "glutenFree",
    "dairyFree",
    "lowCarb",
    "nutFree",
    "lowFodmap",
)

# Display strings / free-form restriction names -> internal diet key.
# Lookup is done on the lowercased restriction; anything not listed here
# passes through unchanged and so never matches a rule value.
DIET_KEY_ALIASES: Dict[str, str] = {
    "vegan": "vegan",
    "vegetarian": "vegetarian",
    "keto": "keto",
    "paleo": "paleo",
    "gluten-free": "glutenFree",
    "dairy-free": "dairyFree",
    "low-carb": "lowCarb",
    "nuts": "nutFree",
    "gluten": "glutenFree",
    "dairy": "dairyFree",
    "low fodmap": "lowFodmap",
    "fodmap": "lowFodmap",
    "fodmap-sensitive": "lowFodmap",
    "fodmap sensitive": "lowFodmap",
}


# ==============================================================================
# INGREDIENT SUBSTITUTION DATABASE
# ==============================================================================

# Order matters: the catalog is scanned top to bottom and the first rule whose
# fragments match an ingredient wins, even if it has no value for the diet.
BASE_SUBSTITUTION_RULES: List[Dict] = [
    {
        "original": ["butter", "unsalted butter", "salted butter"],
        "vegan": "vegan butter or coconut oil",
        "vegetarian": "butter",
        "keto": "butter or ghee",
        "paleo": "ghee or coconut oil",
        "glutenFree": "butter",
        "dairyFree": "coconut oil or vegan butter",
        "lowCarb": "butter",
        "nutFree": "butter or coconut oil",
    },
    {
        "original": ["milk", "whole milk", "2% milk", "skim milk", "dairy milk"],
        "vegan": "almond milk or oat milk",
        "vegetarian": "milk",
        "keto": "heavy cream or unsweetened almond milk",
        "paleo": "coconut milk or almond milk",
        "glutenFree": "milk",
        "dairyFree": "almond milk or oat milk",
        "lowCarb": "unsweetened almond milk",
        "nutFree": "oat milk or soy milk",
        "lowFodmap": "lactose-free milk or almond milk",
    },
    {
        "original": ["eggs", "egg", "whole eggs", "large eggs"],
        "vegan": "flax eggs (1 tbsp ground flax + 3 tbsp water per egg)",
        "vegetarian": "eggs",
        "keto": "eggs",
        "paleo": "eggs",
        "glutenFree": "eggs",
        "dairyFree": "eggs",
        "lowCarb": "eggs",
        "nutFree": "eggs",
    },
    {
        "original": ["bacon", "pork bacon", "turkey bacon"],
        "vegan": "tempeh bacon or coconut bacon",
        "vegetarian": "veggie bacon or smoked tempeh",
        "keto": "bacon",
        "paleo": "uncured bacon",
        "glutenFree": "bacon (check for gluten-free)",
        "dairyFree": "bacon",
        "lowCarb": "bacon",
        "nutFree": "bacon",
    },
    {
        "original": ["chicken", "chicken breast", "chicken thighs"],
        "vegan": "tofu or seitan",
        "vegetarian": "chickpeas or extra-firm tofu",
        "keto": "chicken",
        "paleo": "chicken",
        "glutenFree": "chicken",
        "dairyFree": "chicken",
        "lowCarb": "chicken",
        "nutFree": "chicken",
    },
    {
        "original": ["beef", "ground beef", "beef steak", "steak"],
        "vegan": "beyond beef or lentils",
        "vegetarian": "portobello mushrooms or black beans",
        "keto": "beef",
        "paleo": "grass-fed beef",
        "glutenFree": "beef",
        "dairyFree": "beef",
        "lowCarb": "beef",
        "nutFree": "beef",
    },
    {
        "original": ["cheese", "cheddar cheese", "mozzarella", "parmesan", "parmesan cheese"],
        "vegan": "nutritional yeast or vegan cheese",
        "vegetarian": "cheese",
        "keto": "cheese",
        "paleo": "omit or use cashew cheese",
        "glutenFree": "cheese",
        "dairyFree": "vegan cheese or nutritional yeast",
        "lowCarb": "cheese",
        "nutFree": "cheese (avoid cashew-based alternatives)",
    },
    {
        "original": ["flour", "all-purpose flour", "wheat flour", "plain flour"],
        "vegan": "all-purpose flour",
        "vegetarian": "all-purpose flour",
        "keto": "almond flour or coconut flour",
        "paleo": "almond flour or cassava flour",
        "glutenFree": "gluten-free flour blend or rice flour",
        "dairyFree": "all-purpose flour",
        "lowCarb": "almond flour",
        "nutFree": "rice flour or oat flour",
    },
    {
        "original": ["sugar", "white sugar", "granulated sugar", "cane sugar"],
        "vegan": "organic sugar or coconut sugar",
        "vegetarian": "sugar",
        "keto": "erythritol or stevia",
        "paleo": "honey or maple syrup",
        "glutenFree": "sugar",
        "dairyFree": "sugar",
        "lowCarb": "erythritol or monk fruit sweetener",
        "nutFree": "sugar",
    },
    {
        "original": ["pasta", "spaghetti", "penne", "noodles", "macaroni"],
        "vegan": "pasta",
        "vegetarian": "pasta",
        "keto": "zucchini noodles or shirataki noodles",
        "paleo": "zucchini noodles or sweet potato noodles",
        "glutenFree": "gluten-free pasta or rice noodles",
        "dairyFree": "pasta",
        "lowCarb": "zucchini noodles",
        "nutFree": "pasta",
        "lowFodmap": "gluten-free pasta or rice noodles",
    },
    {
        "original": ["bread", "white bread", "wheat bread", "bread crumbs", "breadcrumbs"],
        "vegan": "bread (check for egg/dairy)",
        "vegetarian": "bread",
        "keto": "almond flour bread or cloud bread",
        "paleo": "almond flour bread or omit",
        "glutenFree": "gluten-free bread",
        "dairyFree": "dairy-free bread",
        "lowCarb": "almond flour bread",
        "nutFree": "rice bread or oat bread",
        "lowFodmap": "gluten-free bread or sourdough spelt (in small serves)",
    },
    {
        "original": ["rice", "white rice", "brown rice", "jasmine rice"],
        "vegan": "rice",
        "vegetarian": "rice",
        "keto": "cauliflower rice",
        "paleo": "cauliflower rice",
        "glutenFree": "rice",
        "dairyFree": "rice",
        "lowCarb": "cauliflower rice",
        "nutFree": "rice",
    },
    {
        "original": ["honey"],
        "vegan": "maple syrup or agave nectar",
        "vegetarian": "honey",
        "keto": "sugar-free syrup or small amount of honey",
        "paleo": "honey",
        "glutenFree": "honey",
        "dairyFree": "honey",
        "lowCarb": "sugar-free syrup",
        "nutFree": "honey",
    },
    {
        "original": ["cream", "heavy cream", "whipping cream", "double cream"],
        "vegan": "coconut cream or cashew cream",
        "vegetarian": "heavy cream",
        "keto": "heavy cream",
        "paleo": "coconut cream",
        "glutenFree": "heavy cream",
        "dairyFree": "coconut cream",
        "lowCarb": "heavy cream",
        "nutFree": "coconut cream or oat cream",
        "lowFodmap": "lactose-free cream or coconut cream",
    },
    {
        "original": ["yogurt", "greek yogurt", "plain yogurt"],
        "vegan": "coconut yogurt or almond yogurt",
        "vegetarian": "yogurt",
        "keto": "full-fat greek yogurt",
        "paleo": "coconut yogurt",
        "glutenFree": "yogurt",
        "dairyFree": "coconut yogurt or almond yogurt",
        "lowCarb": "full-fat greek yogurt",
        "nutFree": "coconut yogurt or soy yogurt",
        "lowFodmap": "lactose-free yogurt or coconut yogurt",
    },
    {
        "original": ["soy sauce"],
        "vegan": "soy sauce",
        "vegetarian": "soy sauce",
        "keto": "soy sauce or coconut aminos",
        "paleo": "coconut aminos",
        "glutenFree": "tamari or gluten-free soy sauce",
        "dairyFree": "soy sauce",
        "lowCarb": "soy sauce",
        "nutFree": "soy sauce",
        "lowFodmap": "tamari (gluten-free) or coconut aminos",
    },
    {
        "original": ["peanuts", "peanut butter", "peanut oil"],
        "vegan": "peanuts or peanut butter",
        "vegetarian": "peanuts or peanut butter",
        "keto": "peanuts or peanut butter",
        "paleo": "almond butter or sunflower seed butter",
        "glutenFree": "peanuts or peanut butter",
        "dairyFree": "peanuts or peanut butter",
        "lowCarb": "peanuts or peanut butter",
        "nutFree": "sunflower seed butter",
    },
    {
        "original": ["almonds", "almond flour", "almond milk", "sliced almonds"],
        "vegan": "almonds",
        "vegetarian": "almonds",
        "keto": "almonds",
        "paleo": "almonds",
        "glutenFree": "almonds",
        "dairyFree": "almonds",
        "lowCarb": "almonds",
        "nutFree": "sunflower seeds or pumpkin seeds",
    },
    {
        "original": ["fish", "salmon", "tuna", "cod", "tilapia"],
        "vegan": "hearts of palm or banana blossom",
        "vegetarian": "omit or use tofu",
        "keto": "fish",
        "paleo": "wild-caught fish",
        "glutenFree": "fish",
        "dairyFree": "fish",
        "lowCarb": "fish",
        "nutFree": "fish",
    },
    {
        "original": ["shrimp", "prawns", "shellfish", "crab", "lobster"],
        "vegan": "hearts of palm or king oyster mushrooms",
        "vegetarian": "omit or use mushrooms",
        "keto": "shrimp",
        "paleo": "shrimp",
        "glutenFree": "shrimp",
        "dairyFree": "shrimp",
        "lowCarb": "shrimp",
        "nutFree": "shrimp",
    },
    {
        "original": ["garlic", "garlic clove", "minced garlic", "garlic powder", "garlic salt"],
        "vegan": "garlic",
        "vegetarian": "garlic",
        "keto": "garlic",
        "paleo": "garlic",
        "glutenFree": "garlic",
        "dairyFree": "garlic",
        "lowCarb": "garlic",
        "nutFree": "garlic",
        "lowFodmap": "garlic-infused oil",
    },
    {
        "original": ["onion", "white onion", "yellow onion", "red onion", "brown onion", "onion powder"],
        "vegan": "onion",
        "vegetarian": "onion",
        "keto": "onion",
        "paleo": "onion",
        "glutenFree": "onion",
        "dairyFree": "onion",
        "lowCarb": "onion",
        "nutFree": "onion",
        "lowFodmap": "green tops of scallions, chives, or a pinch of asafoetida",
    },
]

# App-specific additions, appended after the base rules
CUSTOM_SUBSTITUTION_RULES: List[Dict] = [
    {
        "original": ["shallot", "shallots"],
        "lowFodmap": "green onion tops or chives",
    },
    {
        "original": ["stock", "broth", "chicken stock", "vegetable stock"],
        "lowFodmap": "low FODMAP certified stock or homemade stock without onion/garlic",
    },
    {
        "original": ["tomato sauce", "pasta sauce", "marinara"],
        "lowFodmap": "low FODMAP tomato passata with herbs (no onion/garlic)",
    },
    {
        "original": ["BBQ sauce", "barbecue sauce"],
        "lowFodmap": "low FODMAP BBQ sauce (no onion/garlic), or make your own",
    },
]


# ==============================================================================
# FODMAP HEURISTICS
# ==============================================================================

# (substring triggers, exact-name triggers, replacement), checked in order
# against the lowercased ingredient name.
FODMAP_HEURISTIC_TRIGGERS: List[Tuple[Tuple[str, ...], Tuple[str, ...], str]] = [
    (("garlic",), (), "garlic-infused oil"),
    (("onion",), (), "chives or green onion tops"),
    (("wheat flour",), ("flour",), "gluten-free flour blend"),
    (("pasta",), (), "gluten-free pasta"),
    (("milk",), (), "lactose-free milk"),
    (("cream",), (), "lactose-free cream or coconut cream"),
    (("yogurt",), (), "lactose-free yogurt"),
    (("bread",), (), "gluten-free bread"),
]

FODMAP_MARKER = "fodmap"

# Restriction label used in audit lines for heuristic substitutions
LOW_FODMAP_LABEL = "Low FODMAP"


# ==============================================================================
# REVIEW OPTIONS
# ==============================================================================

# Keyword on the original ingredient name -> candidate picker options.
# "bread" and "flour" get extra handling in the proposal store.
CHOICE_OPTION_TRIGGERS: Dict[str, List[str]] = {
    "garlic": ["garlic-infused oil", "garlic chives"],
    "onion": ["green onion tops", "chives", "asafoetida (pinch)"],
    "bread": ["gluten-free bread", "sourdough spelt (small serve)"],
    "pasta": ["gluten-free pasta", "rice noodles", "zucchini noodles"],
    "milk": ["lactose-free milk", "almond milk"],
    "cream": ["lactose-free cream", "coconut cream"],
    "yogurt": ["lactose-free yogurt", "coconut yogurt"],
    "flour": ["gluten-free flour blend", "rice flour", "almond flour"],
}

BREAD_LOW_CARB_OPTIONS: List[str] = ["almond flour bread", "cloud bread"]
BREAD_DEFAULT_EXTRA_OPTIONS: List[str] = ["almond flour bread"]

LOW_CARB_DIET_PATTERN = r"keto|low[- ]carb"


# ==============================================================================
# INSTRUCTION REWRITES
# ==============================================================================

# (diet display names that trigger the set, [(case-insensitive pattern,
# replacement)]). Diet names are matched exactly; each set is applied once.
# Replacements are blind substring rewrites, so "flour" inside "cornflour"
# is rewritten too.
INSTRUCTION_REWRITES: List[Tuple[Tuple[str, ...], List[Tuple[str, str]]]] = [
    (
        ("Keto", "Low-carb"),
        [
            (r"serve with rice", "serve with cauliflower rice"),
            (r"serve with pasta", "serve with zucchini noodles"),
        ],
    ),
    (
        ("Gluten-free",),
        [
            (r"flour", "gluten-free flour"),
            (r"bread", "gluten-free bread"),
        ],
    ),
]


# ==============================================================================
# SELECTION OPTIONS
# ==============================================================================

DIETARY_OPTIONS: List[str] = [
    "Low FODMAP",
    "Vegan",
    "Vegetarian",
    "Keto",
    "Paleo",
    "Gluten-free",
    "Dairy-free",
    "Low-carb",
    "Low-sodium",
]

ALLERGY_OPTIONS: List[str] = [
    "FODMAP-sensitive",
    "Garlic",
    "Onion",
    "Lactose",
    "Wheat",
    "Nuts",
    "Dairy",
    "Eggs",
    "Shellfish",
    "Soy",
    "Gluten",
    "Fish",
    "Sesame",
]


# ==============================================================================
# AUDIT TRAIL
# ==============================================================================

SUBSTITUTIONS_HEADING = "**Substitutions Made:**"
FODMAP_CORRECTIONS_HEADING = "**FODMAP Corrections:**"
AUDIT_BULLET = "• "

ADAPTATION_DISCLAIMER = (
    "**Note:** This recipe was adapted using a rule-based substitution engine "
    "with FODMAP-aware substitutions. Always check ingredient labels and "
    "portion sizes to ensure they meet your dietary requirements."
)

ADAPTED_TAG = "adapted"

AI_FALLBACK_MESSAGE = "AI unavailable, using built-in substitutions"
