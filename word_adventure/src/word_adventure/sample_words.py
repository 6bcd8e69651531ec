"""Bundled sample vocabulary used when no external catalog is supplied."""

SAMPLE_WORDS = [
    # ANIMALS
    {"id": 1, "word": "butterfly", "category": "animals", "difficulty": "easy", "emoji": "🦋",
     "definition": "A flying insect with large, colorful wings"},
    {"id": 2, "word": "dolphin", "category": "animals", "difficulty": "easy", "emoji": "🐬",
     "definition": "A smart sea mammal that loves to play"},
    {"id": 3, "word": "penguin", "category": "animals", "difficulty": "easy", "emoji": "🐧",
     "definition": "A black and white bird that swims but cannot fly"},
    {"id": 4, "word": "rabbit", "category": "animals", "difficulty": "easy", "emoji": "🐰",
     "definition": "A small animal with long ears that hops"},
    {"id": 5, "word": "octopus", "category": "animals", "difficulty": "medium", "emoji": "🐙",
     "definition": "A sea animal with eight arms"},
    {"id": 6, "word": "chameleon", "category": "animals", "difficulty": "medium", "emoji": "🦎",
     "definition": "A lizard that can change the color of its skin"},
    {"id": 7, "word": "hibernation", "category": "animals", "difficulty": "hard", "emoji": "🐻",
     "definition": "A long, deep sleep some animals take during winter"},
    {"id": 8, "word": "camouflage", "category": "animals", "difficulty": "hard", "emoji": "🐆",
     "definition": "Colors or patterns that help an animal hide"},

    # NATURE
    {"id": 9, "word": "forest", "category": "nature", "difficulty": "easy", "emoji": "🌲",
     "definition": "A large area covered with trees"},
    {"id": 10, "word": "flower", "category": "nature", "difficulty": "easy", "emoji": "🌸",
     "definition": "The colorful part of a plant that makes seeds"},
    {"id": 11, "word": "river", "category": "nature", "difficulty": "easy", "emoji": "🏞️",
     "definition": "A long stream of water flowing to the sea"},
    {"id": 12, "word": "waterfall", "category": "nature", "difficulty": "medium", "emoji": "💧",
     "definition": "Water falling from a high place"},
    {"id": 13, "word": "rainbow", "category": "nature", "difficulty": "medium", "emoji": "🌈",
     "definition": "An arc of colors in the sky after rain"},
    {"id": 14, "word": "glacier", "category": "nature", "difficulty": "hard", "emoji": "🧊",
     "definition": "A huge, slow-moving river of ice"},
    {"id": 15, "word": "ecosystem", "category": "nature", "difficulty": "hard", "emoji": "🌍",
     "definition": "All the living things in a place and how they connect"},

    # FOOD
    {"id": 16, "word": "apple", "category": "food", "difficulty": "easy", "emoji": "🍎",
     "definition": "A round, crunchy fruit that grows on trees"},
    {"id": 17, "word": "pizza", "category": "food", "difficulty": "easy", "emoji": "🍕",
     "definition": "A flat baked bread with toppings"},
    {"id": 18, "word": "banana", "category": "food", "difficulty": "easy", "emoji": "🍌",
     "definition": "A long yellow fruit"},
    {"id": 19, "word": "spaghetti", "category": "food", "difficulty": "medium", "emoji": "🍝",
     "definition": "Long, thin noodles"},
    {"id": 20, "word": "strawberry", "category": "food", "difficulty": "medium", "emoji": "🍓",
     "definition": "A small red fruit with seeds on the outside"},
    {"id": 21, "word": "nutritious", "category": "food", "difficulty": "hard", "emoji": "🥦",
     "definition": "Full of things that help your body grow"},

    # SCIENCE
    {"id": 22, "word": "magnet", "category": "science", "difficulty": "easy", "emoji": "🧲",
     "definition": "A piece of metal that pulls iron toward it"},
    {"id": 23, "word": "telescope", "category": "science", "difficulty": "medium", "emoji": "🔭",
     "definition": "A tool that makes faraway things look closer"},
    {"id": 24, "word": "volcano", "category": "science", "difficulty": "medium", "emoji": "🌋",
     "definition": "A mountain that can erupt with hot lava"},
    {"id": 25, "word": "gravity", "category": "science", "difficulty": "hard", "emoji": "🪐",
     "definition": "The force that pulls things toward the ground"},
    {"id": 26, "word": "laboratory", "category": "science", "difficulty": "hard", "emoji": "🧪",
     "definition": "A room where scientists do experiments"},

    # EMOTIONS
    {"id": 27, "word": "happy", "category": "emotions", "difficulty": "easy", "emoji": "😊",
     "definition": "Feeling good and full of joy"},
    {"id": 28, "word": "brave", "category": "emotions", "difficulty": "easy", "emoji": "🦁",
     "definition": "Ready to face danger or fear"},
    {"id": 29, "word": "curiosity", "category": "emotions", "difficulty": "medium", "emoji": "🤔",
     "definition": "Wanting to learn or know something"},
    {"id": 30, "word": "excitement", "category": "emotions", "difficulty": "medium", "emoji": "🎉",
     "definition": "A feeling of great eagerness"},
    {"id": 31, "word": "compassion", "category": "emotions", "difficulty": "hard", "emoji": "❤️",
     "definition": "Caring about others who are hurting"},

    # SPACE
    {"id": 32, "word": "moon", "category": "space", "difficulty": "easy", "emoji": "🌙",
     "definition": "The bright object that circles the Earth at night"},
    {"id": 33, "word": "rocket", "category": "space", "difficulty": "easy", "emoji": "🚀",
     "definition": "A vehicle that flies into space"},
    {"id": 34, "word": "planet", "category": "space", "difficulty": "medium", "emoji": "🪐",
     "definition": "A large world that travels around a star"},
    {"id": 35, "word": "galaxy", "category": "space", "difficulty": "medium", "emoji": "🌌",
     "definition": "A huge group of stars"},
    {"id": 36, "word": "astronaut", "category": "space", "difficulty": "hard", "emoji": "👩‍🚀",
     "definition": "A person trained to travel in space"},
    {"id": 37, "word": "constellation", "category": "space", "difficulty": "hard", "emoji": "⭐",
     "definition": "A group of stars that makes a picture in the sky"},

    # TRANSPORTATION
    {"id": 38, "word": "bicycle", "category": "transportation", "difficulty": "easy", "emoji": "🚲",
     "definition": "A vehicle with two wheels that you pedal"},
    {"id": 39, "word": "train", "category": "transportation", "difficulty": "easy", "emoji": "🚆",
     "definition": "Connected cars that run on tracks"},
    {"id": 40, "word": "submarine", "category": "transportation", "difficulty": "medium", "emoji": "🛳️",
     "definition": "A boat that travels under water"},
    {"id": 41, "word": "helicopter", "category": "transportation", "difficulty": "medium", "emoji": "🚁",
     "definition": "An aircraft with spinning blades on top"},
    {"id": 42, "word": "locomotive", "category": "transportation", "difficulty": "hard", "emoji": "🚂",
     "definition": "The engine that pulls a train"},

    # WEATHER
    {"id": 43, "word": "cloud", "category": "weather", "difficulty": "easy", "emoji": "☁️",
     "definition": "A white or gray shape floating in the sky"},
    {"id": 44, "word": "snow", "category": "weather", "difficulty": "easy", "emoji": "❄️",
     "definition": "Soft white flakes of frozen water"},
    {"id": 45, "word": "thunderstorm", "category": "weather", "difficulty": "medium", "emoji": "⛈️",
     "definition": "A storm with thunder and lightning"},
    {"id": 46, "word": "tornado", "category": "weather", "difficulty": "medium", "emoji": "🌪️",
     "definition": "A spinning column of wind"},
    {"id": 47, "word": "temperature", "category": "weather", "difficulty": "hard", "emoji": "🌡️",
     "definition": "How hot or cold something is"},

    # MUSIC
    {"id": 48, "word": "drum", "category": "music", "difficulty": "easy", "emoji": "🥁",
     "definition": "An instrument you hit to make a beat"},
    {"id": 49, "word": "guitar", "category": "music", "difficulty": "easy", "emoji": "🎸",
     "definition": "An instrument with strings that you strum"},
    {"id": 50, "word": "melody", "category": "music", "difficulty": "medium", "emoji": "🎵",
     "definition": "A tune made of musical notes"},
    {"id": 51, "word": "orchestra", "category": "music", "difficulty": "hard", "emoji": "🎼",
     "definition": "A large group of musicians playing together"},
    {"id": 52, "word": "symphony", "category": "music", "difficulty": "hard", "emoji": "🎻",
     "definition": "A long piece of music for an orchestra"},

    # ADVENTURE
    {"id": 53, "word": "map", "category": "adventure", "difficulty": "easy", "emoji": "🗺️",
     "definition": "A drawing that shows where places are"},
    {"id": 54, "word": "treasure", "category": "adventure", "difficulty": "easy", "emoji": "💎",
     "definition": "Gold, jewels or other valuable things"},
    {"id": 55, "word": "compass", "category": "adventure", "difficulty": "medium", "emoji": "🧭",
     "definition": "A tool that shows which way is north"},
    {"id": 56, "word": "expedition", "category": "adventure", "difficulty": "hard", "emoji": "🏔️",
     "definition": "A long journey with a special purpose"},
    {"id": 57, "word": "magnificent", "category": "adventure", "difficulty": "hard", "emoji": "✨",
     "definition": "Very beautiful or impressive"},

    # COLORS
    {"id": 58, "word": "purple", "category": "colors", "difficulty": "easy", "emoji": "💜",
     "definition": "The color you get mixing red and blue"},
    {"id": 59, "word": "crimson", "category": "colors", "difficulty": "medium", "emoji": "❤️",
     "definition": "A deep, rich red"},
    {"id": 60, "word": "turquoise", "category": "colors", "difficulty": "hard", "emoji": "🩵",
     "definition": "A blue-green color like a tropical sea"},
]
