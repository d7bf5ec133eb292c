class ElementListener:
    """
    Observer of a document parse. Every method is optional, the defaults do nothing and
    let the interpreter draw as usual.
    """

    def on_document_start(self, canvas, bounds):
        pass

    def on_document_end(self, canvas, bounds):
        pass

    def on_element(self, element_id, element, element_bounds, canvas, document_bounds, paint):
        """
        Called before each fill and stroke pass, and on entering a group.

        @return: the element to draw, a replacement, or None to veto drawing
        """
        return element

    def on_element_drawn(self, element_id, element, canvas, paint):
        pass

    def on_intercept(self, canvas, draw_element):
        """
        @return: True if the listener rendered draw_element itself
        """
        return False


class ListenerChain(ElementListener):
    """
    Fans calls out to several listeners in registration order.

    Element replacements are threaded through the chain, a veto stops it. Interception
    stops at the first listener that handles the element.
    """

    def __init__(self, *listeners):
        self.listeners = list(listeners)

    def __len__(self):
        return len(self.listeners)

    def add(self, listener):
        self.listeners.append(listener)

    def remove(self, listener):
        self.listeners.remove(listener)

    def on_document_start(self, canvas, bounds):
        for listener in self.listeners:
            listener.on_document_start(canvas, bounds)

    def on_document_end(self, canvas, bounds):
        for listener in self.listeners:
            listener.on_document_end(canvas, bounds)

    def on_element(self, element_id, element, element_bounds, canvas, document_bounds, paint):
        for listener in self.listeners:
            element = listener.on_element(
                element_id, element, element_bounds, canvas, document_bounds, paint
            )
            if element is None:
                return None
        return element

    def on_element_drawn(self, element_id, element, canvas, paint):
        for listener in self.listeners:
            listener.on_element_drawn(element_id, element, canvas, paint)

    def on_intercept(self, canvas, draw_element):
        for listener in self.listeners:
            if listener.on_intercept(canvas, draw_element):
                return True
        return False
