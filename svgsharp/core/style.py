"""
Style cascade.

A property of an element is resolved from, in order: the inline `style` declaration,
the presentation attribute of the same name, the rules of the element's classes (the
last class in the list defining the property wins), the rule of the element's id.
"""

from .color import Color

SVG_ATTR_STYLE = "style"
SVG_ATTR_CLASS = "class"
SVG_ATTR_ID = "id"
SVG_VALUE_CURRENT_COLOR = "currentcolor"


def parse_declarations(text):
    """
    Parse `name: value; name: value` into an ordered dict.
    """
    declarations = {}
    if not text:
        return declarations
    for equate in text.split(";"):
        name, sep, value = equate.partition(":")
        if not sep:
            continue
        name = name.strip()
        value = value.strip()
        if name:
            declarations[name] = value
    return declarations


class StyleSheet:
    """
    Selector to declarations table fed by `<style>` blocks.

    Blocks are merged: a later block adds to and overrides the declarations of the same
    selector.
    """

    def __init__(self):
        self.rules = {}

    def __contains__(self, selector):
        return selector in self.rules

    def __len__(self):
        return len(self.rules)

    def get(self, selector):
        return self.rules.get(selector)

    def parse(self, text):
        if not text:
            return
        for block in text.split("}"):
            selectors, sep, body = block.partition("{")
            if not sep:
                continue
            declarations = parse_declarations(body)
            for selector in selectors.split(","):
                selector = selector.strip()
                if not selector:
                    continue
                rule = self.rules.setdefault(selector, {})
                rule.update(declarations)

    def class_value(self, class_name, name):
        rule = self.rules.get("." + class_name)
        if rule is not None:
            return rule.get(name)
        return None

    def id_value(self, element_id, name):
        rule = self.rules.get("#" + element_id)
        if rule is not None:
            return rule.get(name)
        return None


class Properties:
    """
    Cascaded view of one element's attributes.

    A layered element hands its `opacity` to a canvas layer, so it stays out of the
    paint alpha.
    """

    def __init__(self, attributes, style_sheet=None, layered=False):
        self.attributes = attributes
        self.layered = layered
        self.style_sheet = style_sheet
        self.styles = parse_declarations(attributes.get(SVG_ATTR_STYLE))

    def get_string(self, name):
        v = self.styles.get(name)
        if v is None:
            v = self.attributes.get(name)
        if v is None and self.style_sheet is not None:
            v = self._rule_value(name)
        return v

    def _rule_value(self, name):
        v = None
        classes = self.attributes.get(SVG_ATTR_CLASS)
        if classes:
            for cls in classes.split():
                style = self.style_sheet.class_value(cls, name)
                if style is not None:
                    v = style
        if v is None:
            element_id = self.attributes.get(SVG_ATTR_ID)
            if element_id:
                v = self.style_sheet.id_value(element_id, name)
        return v

    def get_color(self, name):
        """
        @return: opaque Color, or None when absent or unrecognised
        """
        v = self.get_string(name)
        if v is None:
            return None
        if v.strip().lower().startswith(SVG_VALUE_CURRENT_COLOR):
            if name == "color":
                return None
            return self.get_color("color")
        return Color.parse(v)

    def get_float(self, name, default=None):
        v = self.get_string(name)
        if v is None:
            return default
        try:
            return float(v)
        except ValueError:
            return default

    def get_opacity(self, name):
        """
        Product of `opacity` and the given specific opacity, as an 8 bit alpha.
        Layered elements use the specific opacity alone.

        @param name: `fill-opacity` or `stroke-opacity`
        @return: alpha in 0..255
        """
        opacity = self.get_float(name, 1.0)
        if not self.layered:
            opacity *= self.get_float("opacity", 1.0)
        opacity = min(max(opacity, 0.0), 1.0)
        return int(round(opacity * 255))
