"""
Smart Paste extraction vocabulary and scoring constants.

Brand list, category keywords, field synonyms and confidence bands used by
the extraction pipeline in parsers/.
"""

# =============================================================================
# CONFIDENCE BANDS
# =============================================================================
# Reviewer-facing tiers: Direct (>= 85), Likely (60-84), Fuzzy (< 60)

DIRECT_THRESHOLD = 85
LIKELY_THRESHOLD = 60

# Tier 1: key was confirmed by a human in this session
ALIAS_HIT = 95

# Tier 2: exact (case/punctuation-insensitive) field name
EXACT_MATCH = 100
# "Weight" against "Weight (kg)": unit qualifier stripped from the field name
EXACT_BASE_NAME = 92

# Tier 3: abbreviation / synonym expansion
ABBREVIATION_MATCH = 82
SYNONYM_MATCH = 78
CONTAINMENT_MATCH = 72

# Tier 4: token overlap. Always strictly below LIKELY_THRESHOLD.
FUZZY_FLOOR = 40
FUZZY_CEILING = 59

# Fuzzy score lost by fields outside the detected category
CROSS_CATEGORY_PENALTY = 15

# Confidence filter presets shown to reviewers
CONFIDENCE_MODES = {
    "strict": DIRECT_THRESHOLD,
    "balanced": LIKELY_THRESHOLD,
    "aggressive": FUZZY_FLOOR,
}


# =============================================================================
# LINE SHAPE LIMITS
# =============================================================================

MIN_LINE_LENGTH = 3
MAX_LINE_LENGTH = 300
MIN_KEY_LENGTH = 2
MAX_KEY_LENGTH = 60
MAX_VALUE_LENGTH = 200


# =============================================================================
# BRANDS
# =============================================================================

KNOWN_BRANDS = [
    "Sony", "Canon", "Nikon", "Panasonic", "Blackmagic Design", "Blackmagic", "RED", "ARRI",
    "Fujifilm", "Fuji", "Leica", "Zeiss", "Sigma", "Tamron", "Tokina", "Rokinon", "Samyang",
    "Voigtlander", "Sennheiser", "Rode", "Røde", "Shure", "Audio-Technica", "Zoom", "Tascam",
    "Sound Devices", "Aputure", "Godox", "Profoto", "Broncolor", "Litepanels", "Kino Flo",
    "Nanlite", "Astera", "DJI", "Zhiyun", "Manfrotto", "Gitzo", "Sachtler", "Tilta", "SmallRig",
    "Wooden Camera", "Atomos", "SmallHD", "Teradek", "Hollyland", "SanDisk", "Samsung", "Lexar",
    "ProGrade", "Apple", "Avid", "Neewer", "Elgato", "K-Tek", "Rycote", "Lectrosonics",
    "Wisycom", "Zaxcom", "Cooke", "Angenieux", "Fujinon", "Schneider", "Tiffen", "Lee Filters",
    "NiSi", "Matthews", "Avenger", "Kupo", "OConnor", "Vinten", "Miller", "Cartoni", "Libec",
    "Benro", "Peak Design", "Sanken", "DPA", "Schoeps", "Neumann", "AKG", "Beyerdynamic",
    "Anton Bauer", "IDX", "Core SWX", "Hawk-Woods", "Bebob", "Dedolight", "Mole-Richardson",
    "Quasar Science", "Pelican", "SKB", "Nanuk", "Porta Brace", "Tenba", "Think Tank", "Deity",
    "Tentacle Sync",
]

# Product nouns that make a free-text line a likely product title
PRODUCT_NOUNS = [
    "camera", "lens", "light", "mic", "microphone", "tripod", "monitor", "recorder", "flash",
    "strobe", "gimbal", "stabilizer", "wireless", "transmitter", "receiver", "boom", "shotgun",
    "panel", "fixture", "battery", "card",
]


# =============================================================================
# CATEGORIES
# =============================================================================

CATEGORY_KEYWORDS = {
    "Cameras": ["camera", "camcorder", "cinema camera", "mirrorless", "dslr", "sensor type",
                "video camera", "digital camera"],
    "Lenses": ["lens", "focal length", "aperture", "f/", "prime lens", "zoom lens", "wide angle",
               "telephoto", "anamorphic"],
    "Lighting": ["light", "led", "strobe", "flash", "softbox", "panel", "fresnel", "rgb light",
                 "bi-color", "watt", "lumen", "fixture"],
    "Audio": ["microphone", "mic", "audio", "recorder", "wireless system", "lavalier", "shotgun",
              "boom pole", "preamp", "mixer"],
    "Support": ["tripod", "monopod", "gimbal", "stabilizer", "fluid head", "slider", "dolly",
                "jib", "crane", "rig"],
    "Grip": ["c-stand", "grip head", "clamp", "flag", "silk", "scrim", "gobo", "sandbag"],
    "Accessories": ["battery", "charger", "cable", "adapter", "cage", "filter", "hood",
                    "follow focus"],
    "Storage": ["ssd", "drive", "memory card", "cfast", "sd card", "storage", "cfexpress"],
    "Monitors": ["monitor", "display", "viewfinder", "evf", "on-camera monitor", "field monitor"],
    "Power": ["v-mount", "gold mount", "power supply", "battery plate", "ac adapter",
              "battery pack"],
}

# Fields that legitimately appear in several categories (no cross-category penalty)
SHARED_FIELDS = {
    "weight", "dimensions", "battery type", "battery life", "mount type", "power input",
    "material", "price",
}


# =============================================================================
# KEY NORMALIZATION
# =============================================================================

# Single-token abbreviations and spelling variants
ABBREVIATIONS = {
    "freq": "frequency", "temp": "temperature", "max": "maximum", "min": "minimum",
    "mic": "microphone", "res": "resolution", "conn": "connector", "dim": "dimensions",
    "dims": "dimensions", "wt": "weight", "bat": "battery", "batt": "battery",
    "vol": "voltage", "pwr": "power", "cap": "capacity", "compat": "compatibility",
    "stab": "stabilization", "adj": "adjustment", "diam": "diameter", "dia": "diameter",
    "ht": "height", "len": "length", "sens": "sensitivity", "imp": "impedance",
    "approx": "approximate", "incl": "included", "info": "information",
    "spec": "specification", "specs": "specifications", "num": "number", "qty": "quantity",
    "ext": "extended", "opt": "optical", "mech": "mechanical", "elec": "electronic",
    "vid": "video", "aud": "audio", "rec": "recording", "cont": "continuous",
    "std": "standard", "colour": "color", "colours": "colors", "grey": "gray",
    "aluminium": "aluminum", "stabilisation": "stabilization", "centre": "center",
}

# Tokens too generic to carry a fuzzy match on their own
STOP_WORDS = {
    "type", "size", "rate", "range", "mode", "with", "from", "for", "the", "and", "max", "min",
    "output", "input", "total", "number", "system", "included", "support", "supported",
    "compatible", "maximum", "minimum", "speed", "level", "control", "depth", "life", "time",
    "capacity", "power", "count", "body", "recording", "card", "cable", "mount", "class",
    "general", "specification", "specifications", "key", "features", "feature", "details",
    "detail", "info", "information", "other", "additional", "about", "product", "item",
    "approximate",
}

# Curated synonyms per canonical field name (normalized form)
COMMON_ALIASES = {
    "sensor type": ["sensor", "image sensor", "sensor specification"],
    "sensor size": ["format", "sensor format"],
    "effective pixels": ["megapixels", "mp", "resolution", "pixel count", "total pixels",
                         "image resolution"],
    "video resolution": ["video", "video recording", "movie recording", "max video",
                         "recording resolution"],
    "frame rates": ["frame rate", "fps", "recording fps"],
    "mount type": ["lens mount", "camera mount", "bayonet"],
    "lens mount": ["mount", "camera mount", "mount type", "bayonet mount"],
    "focal length": ["zoom range", "focal range", "fl"],
    "maximum aperture": ["aperture", "f stop", "fastest aperture", "widest aperture",
                         "wide open"],
    "minimum aperture": ["smallest aperture"],
    "light type": ["lamp type", "bulb type", "light source", "emitter type"],
    "max power output": ["power output", "output power", "wattage", "watts", "max power"],
    "color temperature": ["color temp", "cct", "kelvin", "white balance"],
    "cct range": ["color temperature range", "kelvin range"],
    "microphone type": ["mic type", "transducer", "capsule type"],
    "polar pattern": ["pickup pattern", "pattern", "directivity", "directionality"],
    "frequency response": ["frequency range", "bandwidth"],
    "output connector": ["connector", "connection", "connector type", "output type"],
    "max payload": ["payload", "payload capacity", "max load", "load capacity"],
    "capacity": ["storage capacity", "total capacity", "storage size"],
    "weight": ["body weight", "total weight", "net weight", "unit weight", "approx weight",
               "item weight", "product weight"],
    "dimensions": ["size", "body size", "measurements", "lxwxh", "exterior dimensions",
                   "overall dimensions", "wxhxd", "product dimensions"],
    "iso range": ["iso", "iso sensitivity", "iso speed", "native iso"],
    "af system": ["autofocus system", "focus system", "af type"],
    "af points": ["focus points", "autofocus points", "af coverage"],
    "stabilization": ["image stabilization", "ibis", "sensor shift", "steady shot"],
    "image stabilization": ["ois", "lens stabilization", "optical stabilization", "vr"],
    "wireless connectivity": ["wifi", "wi fi", "bluetooth", "wireless", "nfc"],
    "battery life": ["shots per charge", "battery duration", "runtime"],
    "battery type": ["battery", "power source", "battery model"],
    "weather sealing": ["weather sealed", "dust proof", "moisture resistant",
                        "environmental sealing", "splash proof"],
    "screen size": ["display size", "lcd size", "monitor size"],
    "brightness": ["luminance", "nits", "max brightness"],
    "filter thread": ["filter size", "front filter", "front thread"],
    "self noise": ["equivalent noise", "noise level", "noise floor"],
    "max spl": ["maximum spl", "max sound pressure", "clipping level"],
    "cri": ["color rendering", "color rendering index", "ra"],
    "beam angle": ["beam spread", "coverage angle", "field angle"],
    "power draw": ["power consumption", "max draw", "current draw"],
    "max height": ["maximum height", "extended height", "full height"],
    "min height": ["minimum height", "lowest height"],
    "leg sections": ["sections", "number of sections"],
    "support type": ["tripod type", "stand type"],
    "head type": ["fluid head", "head style", "pan tilt head"],
    "continuous shooting": ["burst rate", "drive speed", "continuous drive"],
    "shutter speed range": ["shutter speed", "shutter range", "mechanical shutter"],
    "viewfinder type": ["evf", "viewfinder", "electronic viewfinder"],
    "memory card slots": ["card slots", "media slots", "memory slots"],
    "video output": ["hdmi output", "video out", "hdmi", "sdi"],
    "audio input": ["mic input", "audio in", "microphone input", "xlr input"],
    "optical design": ["lens construction", "elements/groups", "optical formula", "lens design"],
    "diaphragm blades": ["aperture blades", "iris blades", "number of blades"],
    "minimum focus distance": ["mfd", "close focus", "closest focus", "near limit",
                               "closest focusing distance"],
    "autofocus": ["af", "auto focus"],
    "video format": ["codec", "recording format", "compression", "video codec"],
    "image processor": ["processor", "image engine", "processing engine"],
    "body material": ["construction", "chassis", "body construction", "housing"],
    "material": ["build material", "construction material"],
    "price": ["cost", "list price", "retail price"],
    "color": ["finish", "colorway"],
}


# =============================================================================
# TOP-LEVEL ATTRIBUTE KEYS
# =============================================================================

NAME_KEY_PATTERN = r"^(product\s*name|item\s*name|model\s*name|name|title)$"
BRAND_KEY_PATTERN = r"^(brand|brand\s*name|manufacturer|make)$"
SERIAL_KEY_PATTERN = r"^(serial\s*(number|no\.?|#)?|s/n|sn)$"
MODEL_KEY_PATTERN = (
    r"^(model\s*(number|no\.?|#)?|model|part\s*(number|no\.?|#)|sku|upc|ean|asin"
    r"|mfr\.?\s*(part|#|number)(\s*(number|no\.?|#))?|manufacturer\s*part(\s*number)?"
    r"|item\s*(number|no\.?|#))$"
)

# Lower index = preferred when several price labels are present
PRICE_KEY_PRIORITY = [
    "sale price", "street price", "map price", "price", "msrp", "list price", "rrp",
    "retail price", "srp",
]

CURRENCY_NAMES = {"€": "EUR", "£": "GBP", "¥": "JPY/CNY"}


# =============================================================================
# VALUE CHECKS
# =============================================================================

# spec name (normalized) -> (min, max, warning); bounds apply to the first number
VALUE_RANGES = {
    "weight": (None, 100, "Weight over 100kg, verify value"),
    "focal length": (None, 2000, "Focal length over 2000mm, verify value"),
    "maximum aperture": (0.7, 64, "Unusual aperture value, verify"),
    "minimum aperture": (0.7, 128, "Unusual aperture value, verify"),
    "max power output": (None, 20000, "Power over 20kW, verify value"),
    "screen size": (None, 100, 'Screen size over 100", verify value'),
    "max height": (None, 10, "Height over 10m, verify value"),
    "battery life": (None, 10000, "Unusually high battery life, verify value"),
    "iso range": (1, 10_000_000, "ISO value out of expected range"),
}

# Fields whose values are yes/no even when the catalog does not say so
BOOLEAN_FIELDS = [
    "weather sealing", "touchscreen", "autofocus", "image stabilization", "stabilization",
    "wireless control", "airline approved", "phantom power", "hdr recording", "hood included",
    "head included", "barn doors included", "bi color", "internal focus",
]


# =============================================================================
# UNITS
# =============================================================================

# Unit spellings (lowercase) -> canonical unit symbol
UNIT_TOKENS = {
    "mm": "mm", "millimeter": "mm", "millimeters": "mm", "millimetre": "mm",
    "millimetres": "mm",
    "cm": "cm", "centimeter": "cm", "centimeters": "cm", "centimetre": "cm",
    "centimetres": "cm",
    "m": "m", "meter": "m", "meters": "m", "metre": "m", "metres": "m",
    "in": "in", "in.": "in", "inch": "in", "inches": "in", '"': "in",
    "ft": "ft", "ft.": "ft", "foot": "ft", "feet": "ft", "'": "ft",
    "g": "g", "gram": "g", "grams": "g",
    "kg": "kg", "kgs": "kg", "kilogram": "kg", "kilograms": "kg",
    "oz": "oz", "oz.": "oz", "ounce": "oz", "ounces": "oz",
    "lb": "lb", "lbs": "lb", "lb.": "lb", "lbs.": "lb", "pound": "lb", "pounds": "lb",
    "°c": "°C", "c": "°C", "celsius": "°C",
    "°f": "°F", "f": "°F", "fahrenheit": "°F",
}

LENGTH_TO_MM = {"mm": 1.0, "cm": 10.0, "m": 1000.0, "in": 25.4, "ft": 304.8}
WEIGHT_TO_G = {"g": 1.0, "kg": 1000.0, "oz": 28.349523125, "lb": 453.59237}

METRIC_UNITS = {"mm", "cm", "m", "g", "kg", "°C"}
