from typing import Dict, List, Tuple

# --- Dietary plan content ---

# Fixed notes shown with every allergy plan; they do not vary per allergen.
ALLERGY_SUPPLEMENTATION: Tuple[str, ...] = (
    "Consult with an allergist for proper testing",
    "Work with a registered dietitian familiar with food allergies",
    "Consider vitamin supplements if avoiding major food groups",
    "Keep emergency medications (epinephrine) readily available",
    "Regular monitoring for nutritional deficiencies",
)

PLAN_DAY_LABELS: Tuple[str, ...] = ("Allergy-Safe Monday", "Allergy-Safe Tuesday")

# (bucket on MealSuggestions, display name, items per day)
MEAL_SLOTS: Tuple[Tuple[str, str, int], ...] = (
    ("breakfast", "Breakfast", 3),
    ("lunch", "Lunch", 3),
    ("dinner", "Dinner", 3),
    ("snacks", "Snack", 2),
)

GENERAL_SAFETY_CARD: Dict[str, object] = {
    "id": "general-safety",
    "category": "General Food Safety",
    "title": "Universal Allergy Safety Tips",
    "description": "Essential practices for managing food allergies safely in daily life.",
    "foods": ["fresh fruits", "fresh vegetables", "plain rice", "plain potatoes", "lean meats"],
    "avoid": ["processed foods with unclear ingredients", "foods without labels", "cross-contaminated items"],
    "tips": [
        "Always read food labels carefully",
        "Inform restaurants about your allergies",
        "Carry emergency medication",
        "Use dedicated cooking utensils",
        "Store allergen-free foods separately",
        "Keep a food diary to track reactions",
    ],
    "allergen_specific": False,
}

AI_GUIDANCE_TITLE = "Personalized AI Guidance (not medical advice)"

# Used when the user has no recorded allergies; no knowledge base lookup.
GENERIC_HEALTHY_PLAN: Dict[str, object] = {
    "alternatives": [
        "Fresh fruits and vegetables",
        "Whole grains (brown rice, quinoa, oats)",
        "Lean proteins (chicken, fish, legumes)",
        "Nuts and seeds",
        "Low-fat dairy or plant-based alternatives",
        "Healthy fats (olive oil, avocado)",
        "Plenty of water",
    ],
    "restrictions": [
        "Highly processed foods",
        "Excessive sugar and refined carbs",
        "Trans fats and fried foods",
        "Excessive sodium",
        "Artificial additives and preservatives",
    ],
    "supplementation": [
        "Consult with a nutritionist for personalized advice",
        "Consider a daily multivitamin",
        "Omega-3 fatty acids for heart health",
        "Vitamin D if you have limited sun exposure",
    ],
    "meal_plan": [
        {
            "day": "Monday",
            "meals": [
                {"name": "Breakfast", "items": ["Oatmeal with fresh berries and honey", "Greek yogurt", "Green tea"]},
                {"name": "Lunch", "items": ["Grilled chicken salad with mixed greens", "Quinoa bowl with vegetables", "Herbal tea"]},
                {"name": "Dinner", "items": ["Baked salmon with herbs", "Steamed broccoli and carrots", "Brown rice pilaf"]},
                {"name": "Snack", "items": ["Mixed nuts and dried fruit", "Apple slices", "Water with lemon"]},
            ],
        },
        {
            "day": "Tuesday",
            "meals": [
                {"name": "Breakfast", "items": ["Whole grain toast with avocado", "Scrambled eggs", "Orange juice"]},
                {"name": "Lunch", "items": ["Lentil soup", "Mixed vegetable salad", "Whole grain roll"]},
                {"name": "Dinner", "items": ["Grilled chicken breast", "Roasted sweet potato", "Green beans"]},
                {"name": "Snack", "items": ["Greek yogurt with berries", "Herbal tea"]},
            ],
        },
    ],
}

# --- Chat assistant content ---

# Checked in order; the first intent with a keyword in the message wins.
CHAT_INTENTS: List[Tuple[str, Tuple[str, ...]]] = [
    ("emergency", ("emergency", "severe", "reaction", "anaphyla")),
    ("specialist", ("doctor", "specialist", "allergist")),
    ("food_safety", ("food", "eat", "safe", "label")),
    ("allergy", ("allerg", "symptom")),
]

CHAT_RESPONSES: Dict[str, str] = {
    "emergency": """🚨 **EMERGENCY ALLERGY REACTION PROTOCOL:**

**SEVERE REACTIONS (Anaphylaxis):**
1. 🆘 Call your local emergency number IMMEDIATELY
2. 💉 Use your epinephrine auto-injector if available (inject into thigh)
3. 🏥 Get to an emergency room even if symptoms improve
4. 📞 Contact your doctor

**MILD TO MODERATE REACTIONS:**
1. 💊 Take antihistamines as directed by your doctor
2. 🚿 Remove or wash off the allergen
3. 🧊 Apply a cool compress for skin reactions
4. 📱 Monitor symptoms closely

If you're experiencing symptoms NOW, please seek immediate medical attention!""",

    "specialist": """👨‍⚕️ **Finding an Allergy Specialist:**

- Ask your primary care doctor for a referral to an allergist/immunologist
- Check your insurance provider's directory for board-certified allergists
- Bring a list of your reactions and suspected foods
- Ask about skin-prick or blood testing to confirm your allergies{allergy_question}""",

    "food_safety": """🍽️ **Food Safety for Allergy Management:**

**Reading Labels:**
- Check "Contains" statements
- Look for "may contain" warnings
- Be aware of hidden allergens

**Cross-Contamination Prevention:**
- Use separate cutting boards and utensils
- Clean surfaces thoroughly
- Store allergen-free foods separately

**Dining Out Safely:**
- Call ahead to discuss allergies
- Speak directly with the chef
- Consider carrying allergy cards{allergy_question}""",

    "allergy": """Based on your profile{allergy_clause}, here are my recommendations:

🚨 **Immediate Steps:**
- Always read ingredient labels carefully
- Carry emergency medication (EpiPen) if prescribed
- Inform restaurants about your allergies when dining out

🥗 **Safe Food Alternatives:**
- Use the food scanner to check packaged products
- Consider allergen-free brands and certified products
- Keep a food diary to track reactions

👨‍⚕️ **Medical Advice:**
I recommend consulting with an allergist for personalized treatment.""",

    "default": """Hello{name_clause}! 👋

I'm your Allergy Assistant, here to help with:

🔍 **Allergen Detection** - Scan food ingredients
👨‍⚕️ **Find Specialists** - Getting to an allergist
🥗 **Dietary Guidance** - Safe food recommendations
🚨 **Emergency Help** - Reaction protocols
{profile_line}
How can I assist you today?""",
}

AI_NOTE_HEADER = "🤖 **AI note (not medical advice):**"

# --- Safe recipes ---

SAFE_RECIPE_INGREDIENTS = 4
SAFE_RECIPE_COOK_TIME = "15-20 minutes"

# Appended after the per-allergy recipes for every user.
GENERAL_SAFE_RECIPES: List[Dict[str, object]] = [
    {
        "id": "safe-rice-bowl",
        "name": "Safe Rice & Vegetable Bowl",
        "category": "Lunch",
        "description": "A simple, allergy-friendly rice bowl with safe vegetables.",
        "ingredients": ["white rice", "carrots", "broccoli", "olive oil"],
        "cook_time": "25 minutes",
        "difficulty": "Easy",
        "servings": 2,
    },
    {
        "id": "quinoa-salad",
        "name": "Quinoa Power Salad",
        "category": "Dinner",
        "description": "Protein-rich quinoa salad with fresh vegetables.",
        "ingredients": ["quinoa", "cucumber", "tomatoes", "lemon juice"],
        "cook_time": "20 minutes",
        "difficulty": "Easy",
        "servings": 3,
    },
]
