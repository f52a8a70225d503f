"""
Default gear spec catalog.

Category -> ordered field definitions. Used when a caller does not supply
its own catalog. Shape matches SpecCatalog.from_dict().
"""

DEFAULT_SPEC_CATALOG: dict[str, list[dict]] = {
    "Cameras": [
        {"name": "Sensor Type", "required": True},
        {"name": "Sensor Size", "required": True},
        {"name": "Effective Pixels", "required": True},
        {"name": "Image Processor"},
        {"name": "Video Resolution"},
        {"name": "Frame Rates"},
        {"name": "Video Format"},
        {"name": "Bit Depth"},
        {"name": "HDR Recording", "expected_type": "boolean"},
        {"name": "AF System"},
        {"name": "AF Points", "expected_type": "integer"},
        {"name": "Mount Type", "required": True},
        {"name": "Stabilization"},
        {"name": "ISO Range"},
        {"name": "Shutter Speed Range"},
        {"name": "Continuous Shooting"},
        {"name": "LCD Screen"},
        {"name": "Viewfinder Type"},
        {"name": "Memory Card Slots"},
        {"name": "Video Output"},
        {"name": "Audio Input"},
        {"name": "Wireless Connectivity"},
        {"name": "Body Material"},
        {"name": "Weather Sealing", "expected_type": "boolean"},
        {"name": "Dimensions", "expected_unit": "mm"},
        {"name": "Weight", "expected_unit": "g"},
        {"name": "Battery Type"},
        {"name": "Battery Life"},
    ],
    "Lenses": [
        {"name": "Focal Length", "required": True},
        {"name": "Maximum Aperture", "required": True},
        {"name": "Minimum Aperture"},
        {"name": "Lens Mount", "required": True},
        {"name": "Optical Design"},
        {"name": "Diaphragm Blades", "expected_type": "integer"},
        {"name": "Minimum Focus Distance"},
        {"name": "Autofocus", "expected_type": "boolean"},
        {"name": "Image Stabilization"},
        {"name": "Filter Thread", "expected_unit": "mm"},
        {"name": "Dimensions", "expected_unit": "mm"},
        {"name": "Weight", "expected_unit": "g"},
        {"name": "Hood Included", "expected_type": "boolean"},
        {"name": "Weather Sealing", "expected_type": "boolean"},
    ],
    "Lighting": [
        {"name": "Light Type", "required": True},
        {"name": "Max Power Output", "required": True},
        {"name": "Luminous Flux (lm)", "expected_type": "number"},
        {"name": "Illuminance (lux)", "expected_type": "number"},
        {"name": "CRI", "expected_type": "number"},
        {"name": "TLCI", "expected_type": "number"},
        {"name": "Color Temperature", "required": True},
        {"name": "CCT Range"},
        {"name": "Beam Angle"},
        {"name": "Modifier Mount"},
        {"name": "Wireless Control", "expected_type": "boolean"},
        {"name": "Power Input"},
        {"name": "Power Draw"},
        {"name": "Battery Type"},
        {"name": "Cooling System"},
        {"name": "Dimensions", "expected_unit": "mm"},
        {"name": "Weight", "expected_unit": "g"},
    ],
    "Audio": [
        {"name": "Microphone Type", "required": True},
        {"name": "Polar Pattern", "required": True},
        {"name": "Frequency Response"},
        {"name": "Sensitivity"},
        {"name": "Max SPL"},
        {"name": "Self-Noise"},
        {"name": "Output Connector", "required": True},
        {"name": "Impedance"},
        {"name": "Phantom Power", "expected_type": "boolean"},
        {"name": "Battery Type"},
        {"name": "Battery Life"},
        {"name": "Dimensions", "expected_unit": "mm"},
        {"name": "Weight", "expected_unit": "g"},
    ],
    "Support": [
        {"name": "Support Type", "required": True},
        {"name": "Max Payload", "required": True, "expected_unit": "kg"},
        {"name": "Max Height", "expected_unit": "cm"},
        {"name": "Min Height", "expected_unit": "cm"},
        {"name": "Head Type"},
        {"name": "Leg Sections", "expected_type": "integer"},
        {"name": "Material"},
        {"name": "Weight", "expected_unit": "g"},
    ],
}
