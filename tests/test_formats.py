"""Tests for token serializers."""
import json

from tokens.formats import css_property_name, flatten, to_css, to_json, to_lines
from tokens.tree import Branch, Leaf


def _tree():
    tree = Branch()
    tree.set_leaf(('color', 'accent', 'light'), Leaf('#ff0000ff'))
    tree.set_leaf(('color', 'accent', 'dark'), Leaf('#0000ffff'))
    tree.set_leaf(('surface',), Leaf('#ffffffff'))
    return tree


class TestFormats:

    def test_json_roundtrips_to_nested_mapping(self):
        assert json.loads(to_json(_tree().to_dict())) == {
            'color': {'accent': {
                'light': {'value': '#ff0000ff', 'type': 'color'},
                'dark': {'value': '#0000ffff', 'type': 'color'},
            }},
            'surface': {'value': '#ffffffff', 'type': 'color'},
        }

    def test_flatten(self):
        assert flatten(_tree()) == {
            'color-accent-light': '#ff0000ff',
            'color-accent-dark': '#0000ffff',
            'surface': '#ffffffff',
        }
        assert 'color.accent.dark' in flatten(_tree(), sep='.')

    def test_lines(self):
        assert to_lines(['a: #000000ff', 'b: #ffffffff']) == 'a: #000000ff\nb: #ffffffff'

    def test_css(self):
        css = to_css(['color-accent-dark: #0000ffff', 'surface: #ffffffff'])
        assert css == ':root {\n  --color-accent-dark: #0000ffff;\n  --surface: #ffffffff;\n}'

    def test_css_selector(self):
        assert to_css(['a: #000000ff'], '[data-theme="dark"]').startswith('[data-theme="dark"] {')

    def test_css_names_are_valid_identifiers(self):
        """Dots, parentheses and similar characters cannot appear in custom property names."""
        css = to_css(['color-primary.500: #0000ffff', 'brand-(legacy)-red: #ff0000ff'])
        assert '  --color-primary-500: #0000ffff;' in css
        assert '  --brand-legacy-red: #ff0000ff;' in css

    def test_css_property_name(self):
        assert css_property_name('Color-Accent') == 'color-accent'
        assert css_property_name('a.b/c d') == 'a-b-c-d'
