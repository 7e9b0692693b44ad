"""Tests for SVG output."""

from grout.models import RenderSpec
from grout.render.svg import escape_xml, gradient_id, render_svg


def make_spec(**overrides) -> RenderSpec:
    values = {
        "width": 200,
        "height": 100,
        "background": "cccccc",
        "foreground": "000000",
        "text": "200 x 100",
    }
    values.update(overrides)
    return RenderSpec(**values)


class TestRenderSvg:
    """Test SVG rendering."""

    def test_should_render_rect_background(self):
        svg = render_svg(make_spec(), ["200 x 100"], 15).decode()

        assert svg.startswith("<svg ")
        assert 'width="200" height="100"' in svg
        assert '<rect width="200" height="100" fill="#cccccc" />' in svg
        assert ">200 x 100</text>" in svg
        assert svg.endswith("</svg>")

    def test_circle_radius_uses_smaller_side(self):
        svg = render_svg(make_spec(shape="circle"), ["AB"], 50).decode()

        assert '<circle cx="100" cy="50" r="50"' in svg

    def test_gradient_background(self):
        svg = render_svg(make_spec(background="ff0000,0000ff"), ["x"], 15).decode()

        grad = gradient_id("ff0000", "0000ff")
        assert f'<linearGradient id="{grad}"' in svg
        assert f'fill="url(#{grad})"' in svg
        assert "stop-color:#ff0000" in svg
        assert "stop-color:#0000ff" in svg

    def test_text_is_escaped(self):
        svg = render_svg(make_spec(text="<b>&\"'"), ["<b>&\"'"], 15).decode()

        assert "<b>" not in svg
        assert "&lt;b&gt;&amp;&quot;&apos;" in svg

    def test_colors_are_normalized(self):
        """Color values never reach the markup unparsed."""
        spec = make_spec(background='"/><script>', foreground="#FFF")
        svg = render_svg(spec, ["x"], 15).decode()

        assert "<script>" not in svg
        assert 'fill="#c8c8c8"' in svg
        assert 'fill="#ffffff"' in svg

    def test_weight_is_written(self):
        svg = render_svg(make_spec(weight="bold"), ["x"], 15).decode()

        assert 'font-weight="bold"' in svg

    def test_one_text_element_per_line(self):
        svg = render_svg(make_spec(height=300), ["one", "two", "three"], 20).decode()

        assert svg.count("<text ") == 3
        assert 'y="120"' in svg
        assert 'y="150"' in svg
        assert 'y="180"' in svg

    def test_should_be_deterministic(self):
        spec = make_spec()
        assert render_svg(spec, ["a"], 15) == render_svg(spec, ["a"], 15)


def test_escape_xml_leaves_plain_text_alone():
    assert escape_xml("hello world") == "hello world"
