# backend/data/reference_data.py
# Seed documents for the read-only lookup collections (`flask seed-reference`).

def _sc(name, *parishes):
    return {"name": name, "parishes": list(parishes)}


def _season(first=(), second=(), year_round=False):
    return {"firstSeason": list(first), "secondSeason": list(second), "yearRound": year_round}


def _traits(weight, maturity, rate):
    return {
        "averageWeight": {"value": weight, "unit": "kg"},
        "maturityAge": maturity,
        "productionRate": rate,
    }


DISTRICTS = [
    # ---------------- Central ----------------
    {"name": "Kampala", "region": "Central", "code": "KLA", "subcounties": [
        _sc("Central Division", "Nakasero", "Kololo", "Kampala Central", "Old Kampala", "Kisenyi"),
        _sc("Kawempe Division", "Kawempe", "Kazo", "Makerere", "Mulago", "Wandegeya", "Bwaise"),
        _sc("Makindye Division", "Makindye", "Kibuye", "Nsambya", "Katwe", "Lukuli", "Ggaba"),
        _sc("Nakawa Division", "Nakawa", "Ntinda", "Naguru", "Bukoto", "Kiswa", "Mbuya"),
        _sc("Rubaga Division", "Rubaga", "Namirembe", "Lungujja", "Ndeeba", "Mutundwe", "Busega"),
    ]},
    {"name": "Wakiso", "region": "Central", "code": "WAK", "subcounties": [
        _sc("Kira", "Kira", "Kimwaanyi", "Kasokoso", "Bweyogerere", "Kireka", "Namugongo"),
        _sc("Entebbe Municipality", "Entebbe", "Katabi", "Nakiwogo", "Kiwafu", "Lunyo"),
        _sc("Nangabo", "Nangabo", "Busukuma", "Kiteezi", "Gayaza", "Gitta"),
        _sc("Kakiri", "Kakiri", "Gombe", "Masulita", "Katende"),
        _sc("Nsangi", "Nsangi", "Maya", "Namulanda", "Buloba"),
    ]},
    {"name": "Mukono", "region": "Central", "code": "MUK", "subcounties": [
        _sc("Mukono Municipality", "Mukono Central", "Namilyango", "Wantoni", "Goma"),
        _sc("Goma", "Goma", "Seeta", "Namanve", "Kyetume"),
        _sc("Ntenjeru", "Ntenjeru", "Kimenyedde", "Kyampisi"),
        _sc("Nama", "Nama", "Nabbale", "Kasawo"),
    ]},
    {"name": "Masaka", "region": "Central", "code": "MSK", "subcounties": [
        _sc("Masaka Municipality", "Masaka Central", "Katwe", "Nyendo", "Kimaanya"),
        _sc("Kyesiiga", "Kyesiiga", "Kyanamukaka"),
        _sc("Mukungwe", "Mukungwe", "Buwunga"),
        _sc("Kabonera", "Kabonera", "Kisekka"),
    ]},
    {"name": "Lwengo", "region": "Central", "code": "LWE", "subcounties": [
        _sc("Kyazanga", "Kyazanga", "Lwengo", "Kkingo", "Ndagwe"),
        _sc("Ndagwe", "Ndagwe", "Kalamba", "Kisoga"),
        _sc("Malongo", "Malongo", "Lwankoni"),
    ]},
    # ---------------- Eastern ----------------
    {"name": "Jinja", "region": "Eastern", "code": "JIN", "subcounties": [
        _sc("Jinja Municipality", "Jinja Central", "Walukuba", "Mpumudde", "Masese"),
        _sc("Butembe", "Butembe", "Kakira", "Busede"),
        _sc("Budondo", "Budondo", "Buwenge"),
        _sc("Mafubira", "Mafubira", "Bugembe"),
    ]},
    {"name": "Mbale", "region": "Eastern", "code": "MBL", "subcounties": [
        _sc("Mbale Municipality", "Mbale Central", "Industrial Area", "Namabasa", "Wanale"),
        _sc("Bungokho", "Bungokho", "Busiu", "Namanyonyi"),
        _sc("Nakaloke", "Nakaloke", "Bukhaweka"),
    ]},
    # ---------------- Northern ----------------
    {"name": "Gulu", "region": "Northern", "code": "GUL", "subcounties": [
        _sc("Gulu Municipality", "Gulu Central", "Layibi", "Bardege", "Laroo", "Pecetokwero"),
        _sc("Bungatira", "Bungatira", "Unyama", "Lalogi"),
        _sc("Awach", "Awach", "Paicho"),
        _sc("Patiko", "Patiko", "Lakwana"),
    ]},
    {"name": "Lira", "region": "Northern", "code": "LIR", "subcounties": [
        _sc("Lira Municipality", "Lira Central", "Adyel", "Ojwina", "Railway"),
        _sc("Aromo", "Aromo", "Agweng"),
        _sc("Barr", "Barr", "Agali"),
        _sc("Ogur", "Ogur", "Amach"),
    ]},
    {"name": "Arua", "region": "Northern", "code": "ARU", "subcounties": [
        _sc("Arua Municipality", "Arua Central", "Oli", "Adumi"),
        _sc("Ayivu", "Ayivu", "Manibe", "Oluko"),
        _sc("Maracha", "Maracha", "Nyadri"),
        _sc("Terego", "Terego", "Omugo"),
    ]},
    # ---------------- Western ----------------
    {"name": "Mbarara", "region": "Western", "code": "MBA", "subcounties": [
        _sc("Mbarara Municipality", "Mbarara Central", "Kamukuzi", "Kakoba", "Nyamitanga"),
        _sc("Rubaya", "Rubaya", "Kashare", "Rwanyamahembe"),
        _sc("Bukiro", "Bukiro", "Rubindi"),
        _sc("Biharwe", "Biharwe", "Ruharo"),
    ]},
    {"name": "Kabale", "region": "Western", "code": "KBA", "subcounties": [
        _sc("Kabale Municipality", "Kabale Central", "Rushoroza", "Kigongi"),
        _sc("Ndorwa", "Ndorwa", "Hamurwa", "Rubanda"),
        _sc("Kaharo", "Kaharo", "Kitumba"),
        _sc("Maziba", "Maziba", "Ikumba"),
    ]},
]

CROP_TYPES = [
    {"name": "Maize", "category": "Grains & Cereals",
     "commonVarieties": ["Longe 10H", "Longe 5", "NARO Hybrid 2", "PAN 691", "DK 8031"],
     "seasonality": _season((3, 4, 5), (9, 10, 11)),
     "averageYield": {"value": 2.5, "unit": "tonnes/acre"},
     "description": "Staple cereal crop widely grown across Uganda", "icon": "🌽"},
    {"name": "Rice", "category": "Grains & Cereals",
     "commonVarieties": ["NERICA 4", "NERICA 1", "WITA 9", "K85"],
     "seasonality": _season((3, 4, 5, 6), (9, 10, 11)),
     "averageYield": {"value": 1.5, "unit": "tonnes/acre"},
     "description": "Paddy rice grown in wetlands and irrigated areas", "icon": "🌾"},
    {"name": "Millet", "category": "Grains & Cereals",
     "commonVarieties": ["Finger Millet", "Pearl Millet", "SEREMI 1", "SEREMI 2"],
     "seasonality": _season((3, 4, 5), (9, 10)),
     "description": "Drought-resistant cereal crop", "icon": "🌾"},
    {"name": "Beans", "category": "Legumes & Pulses",
     "commonVarieties": ["NABE 15", "NABE 16", "K132", "K131", "Masindi Yellow"],
     "seasonality": _season((2, 3, 4), (8, 9, 10)),
     "averageYield": {"value": 0.8, "unit": "tonnes/acre"},
     "description": "Common beans - major protein source", "icon": "🫘"},
    {"name": "Groundnuts", "category": "Legumes & Pulses",
     "commonVarieties": ["Red Beauty", "Serenut 1", "Serenut 2", "Serenut 3"],
     "seasonality": _season((3, 4, 5), (9, 10)),
     "description": "Peanuts for oil and consumption", "icon": "🥜"},
    {"name": "Tomatoes", "category": "Vegetables",
     "commonVarieties": ["MT56", "Moneymaker", "Roma VF", "Marglobe"],
     "seasonality": _season(year_round=True),
     "description": "Fresh market and processing tomatoes", "icon": "🍅"},
    {"name": "Cabbage", "category": "Vegetables",
     "commonVarieties": ["Gloria F1", "Copenhagen Market", "Drumhead"],
     "seasonality": _season(year_round=True),
     "description": "Leafy vegetable for local markets", "icon": "🥬"},
    {"name": "Bananas", "category": "Fruits",
     "commonVarieties": ["Matooke", "Gonja", "Sukari Ndizi", "Bogoya"],
     "seasonality": _season(year_round=True),
     "description": "Cooking and dessert bananas", "icon": "🍌"},
    {"name": "Pineapples", "category": "Fruits",
     "commonVarieties": ["Smooth Cayenne", "Queen Victoria"],
     "seasonality": _season(year_round=True),
     "description": "Fresh fruit for local and export markets", "icon": "🍍"},
    {"name": "Cassava", "category": "Root Crops",
     "commonVarieties": ["NASE 14", "NASE 19", "NAROCASS 1"],
     "seasonality": _season(year_round=True),
     "description": "Drought-tolerant staple root crop", "icon": "🥔"},
    {"name": "Sweet Potatoes", "category": "Root Crops",
     "commonVarieties": ["NASPOT 8", "NASPOT 10 O", "Ejumula"],
     "seasonality": _season((3, 4), (9, 10)),
     "description": "Orange and white fleshed sweet potatoes", "icon": "🍠"},
    {"name": "Coffee", "category": "Cash Crops",
     "commonVarieties": ["Robusta", "Arabica", "KR 1-10"],
     "seasonality": _season((10, 11, 12), (5, 6)),
     "description": "Major export crop - Robusta and Arabica", "icon": "☕"},
]

LIVESTOCK_BREEDS = [
    {"name": "Friesian", "animalType": "Cattle", "purpose": ["Dairy"],
     "characteristics": _traits(600, "2 years", "20-30 litres/day"),
     "description": "High milk-producing dairy cattle", "icon": "🐄"},
    {"name": "Ankole", "animalType": "Cattle", "purpose": ["Meat", "Dual Purpose"],
     "characteristics": _traits(400, "3 years", "5-10 litres/day"),
     "description": "Indigenous long-horned cattle", "icon": "🐄"},
    {"name": "Jersey", "animalType": "Cattle", "purpose": ["Dairy"],
     "characteristics": _traits(450, "2 years", "15-25 litres/day"),
     "description": "Dairy cattle with high butterfat content", "icon": "🐄"},
    {"name": "Boer Goat", "animalType": "Goats", "purpose": ["Meat"],
     "characteristics": _traits(80, "6 months", "Fast growth rate"),
     "description": "Meat goat breed from South Africa", "icon": "🐐"},
    {"name": "Mubende Goat", "animalType": "Goats", "purpose": ["Meat", "Dual Purpose"],
     "characteristics": _traits(35, "8 months", "Hardy and prolific"),
     "description": "Indigenous Ugandan goat breed", "icon": "🐐"},
    {"name": "Kuroiler", "animalType": "Poultry", "purpose": ["Meat", "Layers"],
     "characteristics": _traits(3.5, "4 months", "150-200 eggs/year"),
     "description": "Dual-purpose chicken breed", "icon": "🐔"},
    {"name": "Layers (ISA Brown)", "animalType": "Poultry", "purpose": ["Layers"],
     "characteristics": _traits(2, "5 months", "300 eggs/year"),
     "description": "Commercial egg-laying hybrid", "icon": "🐔"},
    {"name": "Large White", "animalType": "Pigs", "purpose": ["Meat", "Breeding"],
     "characteristics": _traits(300, "8 months", "10-12 piglets/litter"),
     "description": "Fast-growing commercial pig breed", "icon": "🐖"},
    {"name": "Tilapia", "animalType": "Fish", "purpose": ["Meat"],
     "characteristics": _traits(0.5, "6 months", "Fast-growing in ponds"),
     "description": "Nile tilapia for pond and cage farming", "icon": "🐟"},
    {"name": "Catfish", "animalType": "Fish", "purpose": ["Meat"],
     "characteristics": _traits(1.5, "6 months", "Hardy and fast-growing"),
     "description": "African catfish for fish farming", "icon": "🐟"},
]
