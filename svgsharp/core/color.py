import re

REGEX_COLOR_HEX = re.compile(r"^#([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")
REGEX_COLOR_RGB = re.compile(r"^rgb\(\s*([^,\s]+)\s*,\s*([^,\s]+)\s*,\s*([^,\s)]+)\s*\)$")

# https://www.w3.org/TR/SVG11/types.html#ColorKeywords
NAMED_COLORS = {
    "aliceblue": (240, 248, 255),
    "antiquewhite": (250, 235, 215),
    "aqua": (0, 255, 255),
    "aquamarine": (127, 255, 212),
    "azure": (240, 255, 255),
    "beige": (245, 245, 220),
    "bisque": (255, 228, 196),
    "black": (0, 0, 0),
    "blanchedalmond": (255, 235, 205),
    "blue": (0, 0, 255),
    "blueviolet": (138, 43, 226),
    "brown": (165, 42, 42),
    "burlywood": (222, 184, 135),
    "cadetblue": (95, 158, 160),
    "chartreuse": (127, 255, 0),
    "chocolate": (210, 105, 30),
    "coral": (255, 127, 80),
    "cornflowerblue": (100, 149, 237),
    "cornsilk": (255, 248, 220),
    "crimson": (220, 20, 60),
    "cyan": (0, 255, 255),
    "darkblue": (0, 0, 139),
    "darkcyan": (0, 139, 139),
    "darkgoldenrod": (184, 134, 11),
    "darkgray": (169, 169, 169),
    "darkgreen": (0, 100, 0),
    "darkgrey": (169, 169, 169),
    "darkkhaki": (189, 183, 107),
    "darkmagenta": (139, 0, 139),
    "darkolivegreen": (85, 107, 47),
    "darkorange": (255, 140, 0),
    "darkorchid": (153, 50, 204),
    "darkred": (139, 0, 0),
    "darksalmon": (233, 150, 122),
    "darkseagreen": (143, 188, 143),
    "darkslateblue": (72, 61, 139),
    "darkslategray": (47, 79, 79),
    "darkslategrey": (47, 79, 79),
    "darkturquoise": (0, 206, 209),
    "darkviolet": (148, 0, 211),
    "deeppink": (255, 20, 147),
    "deepskyblue": (0, 191, 255),
    "dimgray": (105, 105, 105),
    "dimgrey": (105, 105, 105),
    "dodgerblue": (30, 144, 255),
    "firebrick": (178, 34, 34),
    "floralwhite": (255, 250, 240),
    "forestgreen": (34, 139, 34),
    "fuchsia": (255, 0, 255),
    "gainsboro": (220, 220, 220),
    "ghostwhite": (248, 248, 255),
    "gold": (255, 215, 0),
    "goldenrod": (218, 165, 32),
    "gray": (128, 128, 128),
    "grey": (128, 128, 128),
    "green": (0, 128, 0),
    "greenyellow": (173, 255, 47),
    "honeydew": (240, 255, 240),
    "hotpink": (255, 105, 180),
    "indianred": (205, 92, 92),
    "indigo": (75, 0, 130),
    "ivory": (255, 255, 240),
    "khaki": (240, 230, 140),
    "lavender": (230, 230, 250),
    "lavenderblush": (255, 240, 245),
    "lawngreen": (124, 252, 0),
    "lemonchiffon": (255, 250, 205),
    "lightblue": (173, 216, 230),
    "lightcoral": (240, 128, 128),
    "lightcyan": (224, 255, 255),
    "lightgoldenrodyellow": (250, 250, 210),
    "lightgray": (211, 211, 211),
    "lightgreen": (144, 238, 144),
    "lightgrey": (211, 211, 211),
    "lightpink": (255, 182, 193),
    "lightsalmon": (255, 160, 122),
    "lightseagreen": (32, 178, 170),
    "lightskyblue": (135, 206, 250),
    "lightslategray": (119, 136, 153),
    "lightslategrey": (119, 136, 153),
    "lightsteelblue": (176, 196, 222),
    "lightyellow": (255, 255, 224),
    "lime": (0, 255, 0),
    "limegreen": (50, 205, 50),
    "linen": (250, 240, 230),
    "magenta": (255, 0, 255),
    "maroon": (128, 0, 0),
    "mediumaquamarine": (102, 205, 170),
    "mediumblue": (0, 0, 205),
    "mediumorchid": (186, 85, 211),
    "mediumpurple": (147, 112, 219),
    "mediumseagreen": (60, 179, 113),
    "mediumslateblue": (123, 104, 238),
    "mediumspringgreen": (0, 250, 154),
    "mediumturquoise": (72, 209, 204),
    "mediumvioletred": (199, 21, 133),
    "midnightblue": (25, 25, 112),
    "mintcream": (245, 255, 250),
    "mistyrose": (255, 228, 225),
    "moccasin": (255, 228, 181),
    "navajowhite": (255, 222, 173),
    "navy": (0, 0, 128),
    "oldlace": (253, 245, 230),
    "olive": (128, 128, 0),
    "olivedrab": (107, 142, 35),
    "orange": (255, 165, 0),
    "orangered": (255, 69, 0),
    "orchid": (218, 112, 214),
    "palegoldenrod": (238, 232, 170),
    "palegreen": (152, 251, 152),
    "paleturquoise": (175, 238, 238),
    "palevioletred": (219, 112, 147),
    "papayawhip": (255, 239, 213),
    "peachpuff": (255, 218, 185),
    "peru": (205, 133, 63),
    "pink": (255, 192, 203),
    "plum": (221, 160, 221),
    "powderblue": (176, 224, 230),
    "purple": (128, 0, 128),
    "red": (255, 0, 0),
    "rosybrown": (188, 143, 143),
    "royalblue": (65, 105, 225),
    "saddlebrown": (139, 69, 19),
    "salmon": (250, 128, 114),
    "sandybrown": (244, 164, 96),
    "seagreen": (46, 139, 87),
    "seashell": (255, 245, 238),
    "sienna": (160, 82, 45),
    "silver": (192, 192, 192),
    "skyblue": (135, 206, 235),
    "slateblue": (106, 90, 205),
    "slategray": (112, 128, 144),
    "slategrey": (112, 128, 144),
    "snow": (255, 250, 250),
    "springgreen": (0, 255, 127),
    "steelblue": (70, 130, 180),
    "tan": (210, 180, 140),
    "teal": (0, 128, 128),
    "thistle": (216, 191, 216),
    "tomato": (255, 99, 71),
    "turquoise": (64, 224, 208),
    "violet": (238, 130, 238),
    "wheat": (245, 222, 179),
    "white": (255, 255, 255),
    "whitesmoke": (245, 245, 245),
    "yellow": (255, 255, 0),
    "yellowgreen": (154, 205, 50),
}


class Color:
    """
    32 bit ARGB color.

    Parsing follows SVG 1.1 paint syntax: `#rgb`, `#rrggbb`, `rgb(r, g, b)` with integer
    or percentage channels and the named color keywords.
    """

    def __init__(self, *args):
        if len(args) == 1:
            v = args[0]
            if isinstance(v, Color):
                self.value = v.value
            else:
                self.value = int(v) & 0xFFFFFFFF
        elif len(args) == 3:
            self.value = Color.rgb_to_int(*args)
        elif len(args) == 4:
            r, g, b, a = args
            self.value = Color.rgb_to_int(r, g, b, a)
        else:
            self.value = Color.rgb_to_int(0, 0, 0)

    def __int__(self):
        return self.value

    def __str__(self):
        return self.hex

    def __repr__(self):
        return f"Color('{self.hexa}')"

    def __eq__(self, other):
        if self is other:
            return True
        if isinstance(other, Color):
            return self.value == other.value
        if isinstance(other, int):
            return self.value == other
        return False

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(self.value)

    @staticmethod
    def crimp(v):
        v = int(round(v))
        if v < 0:
            return 0
        if v > 255:
            return 255
        return v

    @staticmethod
    def rgb_to_int(r, g, b, a=255):
        return (
            Color.crimp(a) << 24
            | Color.crimp(r) << 16
            | Color.crimp(g) << 8
            | Color.crimp(b)
        )

    @staticmethod
    def parse(color_string):
        """
        Parse an SVG color into an opaque Color.

        @return: Color or None if the text is not a recognised color
        """
        if color_string is None:
            return None
        color_string = color_string.strip()
        match = REGEX_COLOR_HEX.match(color_string)
        if match:
            return Color(Color.parse_color_hex(match.group(1)))
        match = REGEX_COLOR_RGB.match(color_string)
        if match:
            try:
                return Color(*[Color.parse_channel(v) for v in match.groups()])
            except ValueError:
                return None
        rgb = NAMED_COLORS.get(color_string.lower())
        if rgb is not None:
            return Color(*rgb)
        return None

    @staticmethod
    def parse_channel(v):
        if v.endswith("%"):
            return round(float(v[:-1]) / 100.0 * 255)
        return int(v)

    @staticmethod
    def parse_color_hex(h):
        if len(h) == 3:
            h = f"{h[0]}{h[0]}{h[1]}{h[1]}{h[2]}{h[2]}"
        return 0xFF000000 | int(h, 16)

    def with_alpha(self, a):
        return Color(self.red, self.green, self.blue, a)

    @property
    def alpha(self):
        return (self.value >> 24) & 0xFF

    @property
    def red(self):
        return (self.value >> 16) & 0xFF

    @property
    def green(self):
        return (self.value >> 8) & 0xFF

    @property
    def blue(self):
        return self.value & 0xFF

    @property
    def rgb(self):
        return self.red, self.green, self.blue

    @property
    def hexa(self):
        return "#%02x%02x%02x%02x" % (self.alpha, self.red, self.green, self.blue)

    @property
    def hex(self):
        if self.alpha == 0xFF:
            return "#%02x%02x%02x" % (self.red, self.green, self.blue)
        return self.hexa


BLACK = Color(0, 0, 0)
