"""
Starter food and exercise catalogs.
Food nutrients are per serving; exercise energy cost is for a 70 kg adult.
Sources: USDA FoodData Central, Compendium of Physical Activities.
"""

INITIAL_FOODS = [
    # Grains
    {"food_name": "Oatmeal, cooked", "serving_size": "1 cup (234 g)", "calories_per_serving": 166,
     "protein": 5.9, "carbohydrates": 28.1, "fat": 3.6, "category": "Grains", "verified": True},
    {"food_name": "Brown rice, cooked", "serving_size": "1 cup (195 g)", "calories_per_serving": 218,
     "protein": 4.5, "carbohydrates": 45.8, "fat": 1.6, "category": "Grains", "verified": True},
    {"food_name": "White rice, cooked", "serving_size": "1 cup (158 g)", "calories_per_serving": 205,
     "protein": 4.3, "carbohydrates": 44.5, "fat": 0.4, "category": "Grains", "verified": True},
    {"food_name": "Whole wheat bread", "serving_size": "1 slice (32 g)", "calories_per_serving": 81,
     "protein": 4.0, "carbohydrates": 13.8, "fat": 1.1, "category": "Grains", "verified": True},
    {"food_name": "Quinoa, cooked", "serving_size": "1 cup (185 g)", "calories_per_serving": 222,
     "protein": 8.1, "carbohydrates": 39.4, "fat": 3.6, "category": "Grains", "verified": True},

    # Protein
    {"food_name": "Chicken breast, grilled", "serving_size": "100 g", "calories_per_serving": 165,
     "protein": 31.0, "carbohydrates": 0.0, "fat": 3.6, "category": "Protein", "verified": True},
    {"food_name": "Egg, whole, boiled", "serving_size": "1 large (50 g)", "calories_per_serving": 78,
     "protein": 6.3, "carbohydrates": 0.6, "fat": 5.3, "category": "Protein", "verified": True},
    {"food_name": "Salmon, baked", "serving_size": "100 g", "calories_per_serving": 206,
     "protein": 22.1, "carbohydrates": 0.0, "fat": 12.4, "category": "Protein", "verified": True},
    {"food_name": "Tofu, firm", "serving_size": "100 g", "calories_per_serving": 144,
     "protein": 17.3, "carbohydrates": 2.8, "fat": 8.7, "category": "Protein", "verified": True},
    {"food_name": "Lentils, boiled", "serving_size": "1 cup (198 g)", "calories_per_serving": 230,
     "protein": 17.9, "carbohydrates": 39.9, "fat": 0.8, "category": "Protein", "verified": True},

    # Dairy
    {"food_name": "Greek yogurt, plain, nonfat", "serving_size": "170 g", "calories_per_serving": 100,
     "protein": 17.3, "carbohydrates": 6.1, "fat": 0.7, "category": "Dairy", "verified": True},
    {"food_name": "Milk, 2%", "serving_size": "1 cup (244 g)", "calories_per_serving": 122,
     "protein": 8.1, "carbohydrates": 11.7, "fat": 4.8, "category": "Dairy", "verified": True},
    {"food_name": "Cottage cheese, low fat", "serving_size": "1/2 cup (113 g)", "calories_per_serving": 81,
     "protein": 14.0, "carbohydrates": 3.1, "fat": 1.2, "category": "Dairy", "verified": True},

    # Fruit and vegetables
    {"food_name": "Banana", "serving_size": "1 medium (118 g)", "calories_per_serving": 105,
     "protein": 1.3, "carbohydrates": 27.0, "fat": 0.4, "category": "Fruits", "verified": True},
    {"food_name": "Apple", "serving_size": "1 medium (182 g)", "calories_per_serving": 95,
     "protein": 0.5, "carbohydrates": 25.1, "fat": 0.3, "category": "Fruits", "verified": True},
    {"food_name": "Broccoli, steamed", "serving_size": "1 cup (156 g)", "calories_per_serving": 55,
     "protein": 3.7, "carbohydrates": 11.2, "fat": 0.6, "category": "Vegetables", "verified": True},
    {"food_name": "Spinach, raw", "serving_size": "1 cup (30 g)", "calories_per_serving": 7,
     "protein": 0.9, "carbohydrates": 1.1, "fat": 0.1, "category": "Vegetables", "verified": True},

    # Fats
    {"food_name": "Almonds", "serving_size": "28 g", "calories_per_serving": 164,
     "protein": 6.0, "carbohydrates": 6.1, "fat": 14.2, "category": "Nuts", "verified": True},
    {"food_name": "Peanut butter", "serving_size": "2 tbsp (32 g)", "calories_per_serving": 188,
     "protein": 8.0, "carbohydrates": 6.3, "fat": 16.1, "category": "Nuts", "verified": True},
    {"food_name": "Olive oil", "serving_size": "1 tbsp (14 g)", "calories_per_serving": 119,
     "protein": 0.0, "carbohydrates": 0.0, "fat": 13.5, "category": "Fats", "verified": True},
]

INITIAL_EXERCISES = [
    {"exercise_name": "Running (8 km/h)", "category": "Cardio", "equipment_needed": "None",
     "muscle_groups": "Legs, Core", "difficulty_level": "Intermediate", "calories_per_minute": 9.8,
     "exercise_type": "Cardio", "instructions": "Steady pace run on flat ground.", "verified": True},
    {"exercise_name": "Cycling, moderate", "category": "Cardio", "equipment_needed": "Bicycle",
     "muscle_groups": "Legs", "difficulty_level": "Beginner", "calories_per_minute": 8.2,
     "exercise_type": "Cardio", "instructions": "Cycle at 19-22 km/h.", "verified": True},
    {"exercise_name": "Brisk walking", "category": "Cardio", "equipment_needed": "None",
     "muscle_groups": "Legs", "difficulty_level": "Beginner", "calories_per_minute": 4.3,
     "exercise_type": "Cardio", "instructions": "Walk at about 6 km/h.", "verified": True},
    {"exercise_name": "Swimming, freestyle", "category": "Cardio", "equipment_needed": "Pool",
     "muscle_groups": "Full Body", "difficulty_level": "Intermediate", "calories_per_minute": 9.0,
     "exercise_type": "Cardio", "instructions": "Continuous laps at moderate effort.", "verified": True},
    {"exercise_name": "Jump rope", "category": "Cardio", "equipment_needed": "Rope",
     "muscle_groups": "Legs, Shoulders", "difficulty_level": "Intermediate", "calories_per_minute": 12.3,
     "exercise_type": "Cardio", "instructions": "Skip at a steady rhythm.", "verified": True},
    {"exercise_name": "Barbell squat", "category": "Strength", "equipment_needed": "Barbell",
     "muscle_groups": "Quadriceps, Glutes", "difficulty_level": "Intermediate", "calories_per_minute": 6.0,
     "exercise_type": "Strength", "instructions": "Descend until thighs are parallel, drive up.", "verified": True},
    {"exercise_name": "Bench press", "category": "Strength", "equipment_needed": "Barbell, Bench",
     "muscle_groups": "Chest, Triceps", "difficulty_level": "Intermediate", "calories_per_minute": 5.0,
     "exercise_type": "Strength", "instructions": "Lower the bar to mid-chest, press up.", "verified": True},
    {"exercise_name": "Deadlift", "category": "Strength", "equipment_needed": "Barbell",
     "muscle_groups": "Back, Hamstrings, Glutes", "difficulty_level": "Advanced", "calories_per_minute": 6.5,
     "exercise_type": "Strength", "instructions": "Hinge at the hips with a neutral spine.", "verified": True},
    {"exercise_name": "Push-ups", "category": "Strength", "equipment_needed": "None",
     "muscle_groups": "Chest, Shoulders, Triceps", "difficulty_level": "Beginner", "calories_per_minute": 7.0,
     "exercise_type": "Bodyweight", "instructions": "Keep the body straight from head to heels.", "verified": True},
    {"exercise_name": "Plank", "category": "Core", "equipment_needed": "None",
     "muscle_groups": "Core", "difficulty_level": "Beginner", "calories_per_minute": 3.5,
     "exercise_type": "Bodyweight", "instructions": "Hold a straight line on forearms and toes.", "verified": True},
    {"exercise_name": "Yoga flow", "category": "Flexibility", "equipment_needed": "Mat",
     "muscle_groups": "Full Body", "difficulty_level": "Beginner", "calories_per_minute": 3.0,
     "exercise_type": "Flexibility", "instructions": "Sun salutation sequence.", "verified": True},
]
