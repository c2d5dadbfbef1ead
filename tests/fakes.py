"""Faux objets Playwright (page, locator, navigateur) pour les tests sans navigateur."""

from playwright.sync_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError


class FakeLocator:
    def __init__(self, elements):
        self.elements = list(elements)

    def count(self):
        return len(self.elements)

    def nth(self, index):
        return self.elements[index]

    @property
    def first(self):
        if not self.elements:
            raise PlaywrightError("Locator has no element")
        return self.elements[0]

    def all_inner_texts(self):
        return [element.text for element in self.elements]


class FakeElement:
    """Élément : texte, sous-éléments par sélecteur et interactions enregistrées."""

    def __init__(self, text="", children=None, checked=False, on_click=None):
        self.text = text
        self.children = children or {}
        self.checked = checked
        self.on_click = on_click
        self.value = None
        self.clicks = 0

    def locator(self, selector):
        return FakeLocator(self.children.get(selector, []))

    def inner_text(self, timeout=None):
        return self.text

    def fill(self, value):
        self.value = value

    def click(self):
        self.clicks += 1
        if self.on_click:
            self.on_click()

    def is_checked(self):
        return self.checked

    def check(self):
        self.checked = True


class FakePage(FakeElement):
    """Page : navigation, attentes bornées et listes déroulantes."""

    def __init__(self, children=None, selectable=(), context=None):
        super().__init__(children=children)
        self.url = "about:blank"
        self.visited = []
        self.selectable = set(selectable)
        self.selected = {}
        self.context = context
        self.closed = False

    def goto(self, url, **kwargs):
        self.visited.append(url)
        self.url = url

    def wait_for_selector(self, selector, timeout=None):
        if not self.children.get(selector):
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms waiting for {selector}")
        return self.children[selector][0]

    def wait_for_load_state(self, state=None, timeout=None):
        return None

    def wait_for_url(self, predicate, timeout=None):
        if not predicate(self.url):
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms waiting for navigation")

    def select_option(self, selector, value):
        if selector not in self.selectable:
            raise PlaywrightError(f"No select element matching {selector}")
        self.selected[selector] = value

    def close(self):
        self.closed = True


class FakeContext:
    def __init__(self, page):
        self.page = page
        self.init_scripts = []

    def add_init_script(self, script):
        self.init_scripts.append(script)

    def new_page(self):
        return self.page


class FakeBrowser:
    def __init__(self, page):
        self.page = page
        self.closed = False

    def new_context(self, **kwargs):
        return FakeContext(self.page)

    def close(self):
        self.closed = True


class FakeChromium:
    def __init__(self, browser):
        self.browser = browser

    def launch(self, **kwargs):
        return self.browser


class FakePlaywright:
    """Remplace sync_playwright() : utilisable dans un bloc with."""

    def __init__(self, browser):
        self.chromium = FakeChromium(browser)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False
