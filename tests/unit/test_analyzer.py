"""
Unit Tests for Template Analyzer
================================

Tests for template parsing and parameter inference.
"""

import pytest

from language_atlas.core.dsl.analyzer import TemplateAnalyzer
from language_atlas.core.dsl.resolver import VariantResolver
from language_atlas.core.exceptions import TemplateSyntaxError, UnknownPlaceholderError
from language_atlas.models.schemas import FieldDef, LiteralSegment, ParamDef, PlaceholderSegment


@pytest.fixture
def analyzer():
    return TemplateAnalyzer()


@pytest.fixture
def resolve(language_type):
    """Resolve a FieldDef against English/Spanish/French."""
    resolver = VariantResolver(language_type)
    return resolver.resolve_field


class TestParseTemplate:
    """Test splitting template strings into segments."""

    def test_constant_template(self, analyzer):
        """Test text without placeholders is one literal segment."""
        template = analyzer.parse_template("greeting", "English", "Hello")

        assert template.segments == [LiteralSegment(text="Hello")]
        assert template.is_constant is True
        assert template.constant_text == "Hello"

    def test_empty_template(self, analyzer):
        """Test an empty string is a constant empty text."""
        template = analyzer.parse_template("blank", "English", "")

        assert template.segments == []
        assert template.constant_text == ""

    def test_placeholders_in_order(self, analyzer):
        """Test placeholders are reported by first occurrence."""
        template = analyzer.parse_template("date", "English", "{month}/{day}/{year} ({month})")

        assert template.placeholders == ["month", "day", "year"]
        assert template.segments[:2] == [PlaceholderSegment(name="month"), LiteralSegment(text="/")]
        assert template.is_constant is False

    def test_escaped_braces(self, analyzer):
        """Test doubled braces become literal text in a single segment."""
        template = analyzer.parse_template("set", "English", "{{{item}}} and {{}}")

        assert template.segments == [
            LiteralSegment(text="{"),
            PlaceholderSegment(name="item"),
            LiteralSegment(text="} and {}"),
        ]

    def test_escaped_braces_only(self, analyzer):
        """Test a template of escaped braces is constant."""
        assert analyzer.parse_template("set", "English", "{{}}").constant_text == "{}"

    @pytest.mark.parametrize("spec", ["", ">8", "<3", "^10", "*^9", "12", "0>4"])
    def test_supported_format_specs(self, analyzer, spec):
        """Test fill, alignment and width are accepted."""
        source = "{name:" + spec + "}" if spec else "{name}"
        template = analyzer.parse_template("f", "English", source)
        assert template.segments == [PlaceholderSegment(name="name", format_spec=spec)]

    @pytest.mark.parametrize("source, reason", [
        ("Hello {", "unbalanced brace"),
        ("Hello }", "unbalanced brace"),
        ("{}", "empty placeholder"),
        ("{0}", "is not a parameter name"),
        ("{a.b}", "is not a parameter name"),
        ("{a[0]}", "is not a parameter name"),
        ("{for}", "is not a parameter name"),
        ("{self}", "cannot be named 'self'"),
        ("{name!r}", "conversion '!r' is not supported"),
        ("{name:{width}}", "nested brace"),
        ("{name:.2f}", "format spec '.2f' is not supported"),
        ("{name:,}", "format spec ',' is not supported"),
    ])
    def test_malformed_templates(self, analyzer, source, reason):
        """Test malformed templates raise TemplateSyntaxError."""
        with pytest.raises(TemplateSyntaxError) as exc_info:
            analyzer.parse_template("f", "English", source)

        error = exc_info.value
        assert reason in str(error)
        assert error.field == "f"
        assert error.variant == "English"
        assert error.template == source

    def test_render_pads_text(self, analyzer):
        """Test format specs apply to the text rendering of the value."""
        template = analyzer.parse_template("f", "English", "[{n:>4}]")
        assert template.render({"n": 7}) == "[   7]"


class TestAnalyzeField:
    """Test parameter settlement for resolved fields."""

    def test_constant_field(self, analyzer, resolve):
        """Test fields without parameters return constant text."""
        analyzed = analyzer.analyze(resolve(FieldDef(name="greeting", templates={"English": "Hello"})))

        assert analyzed.params == []
        assert analyzed.params_inferred is False
        assert analyzed.returns_constant is True

    def test_declared_parameters(self, analyzer, resolve):
        """Test declared parameters are kept in order with their hints."""
        params = [ParamDef(name="day", type_hint="int"), ParamDef(name="month", type_hint="int")]
        field = FieldDef(name="date", params=params, templates={"English": "{month}/{day}"})
        analyzed = analyzer.analyze(resolve(field))

        assert analyzed.params == params
        assert analyzed.param_names == ["day", "month"]
        assert analyzed.unused_params == []
        assert analyzed.returns_constant is False

    def test_inferred_parameters_follow_authored_order(self, analyzer, resolve):
        """Test undeclared parameters come from placeholders by first occurrence."""
        field = FieldDef(
            name="date",
            templates={"French": "{day}/{month}/{year}", "English": "{month}/{day}/{year}"},
        )
        analyzed = analyzer.analyze(resolve(field))

        assert analyzed.param_names == ["day", "month", "year"]
        assert analyzed.params_inferred is True
        assert all(param.type_hint is None for param in analyzed.params)

    def test_inferred_parameters_across_variants(self, analyzer, resolve):
        """Test a placeholder used by only one variant still becomes a parameter."""
        field = FieldDef(name="farewell", templates={"English": "Goodbye", "Spanish": "Adios, {name}"})
        analyzed = analyzer.analyze(resolve(field))

        assert analyzed.param_names == ["name"]

    def test_unknown_placeholder(self, analyzer, resolve):
        """Test declared lists must cover every placeholder."""
        field = FieldDef(
            name="farewell",
            params=[ParamDef(name="name")],
            templates={"English": "Goodbye, {name}", "French": "Au revoir, {city}"},
            line=3,
        )
        with pytest.raises(UnknownPlaceholderError) as exc_info:
            analyzer.analyze(resolve(field))

        error = exc_info.value
        assert error.placeholder == "city"
        assert error.variant == "French"
        assert "unknown parameter 'city' referenced in template for 'French'" in str(error)

    def test_unused_parameters(self, analyzer, resolve):
        """Test declared parameters need not be used."""
        field = FieldDef(
            name="content",
            params=[ParamDef(name="content"), ParamDef(name="extra")],
            templates={"English": "C: {content}"},
        )
        analyzed = analyzer.analyze(resolve(field))

        assert analyzed.unused_params == ["extra"]
        assert analyzed.param_names == ["content", "extra"]

    def test_filled_variants_share_default_template(self, analyzer, resolve):
        """Test variants filled from the default reuse its parsed template."""
        field = FieldDef(name="farewell", templates={"English": "Bye, {name}", "French": "Salut, {name}"})
        analyzed = analyzer.analyze(resolve(field))

        assert list(analyzed.templates) == ["English", "Spanish", "French"]
        assert analyzed.templates["Spanish"] is analyzed.templates["English"]
        assert analyzed.templates["French"].source == "Salut, {name}"

    def test_placeholder_field(self, analyzer, resolve):
        """Test placeholder fields keep their parameters and return fixed text."""
        params = [ParamDef(name="a", type_hint="int"), ParamDef(name="b", type_hint="int")]
        analyzed = analyzer.analyze(resolve(FieldDef(name="dummy_args", params=params)))

        assert analyzed.is_placeholder is True
        assert analyzed.returns_constant is False
        assert analyzed.params == params
        assert analyzed.unused_params == ["a", "b"]
        assert {template.constant_text for template in analyzed.templates.values()} == {"ToDo!"}

    def test_placeholder_text_with_braces_stays_literal(self, analyzer, language_type):
        """Test placeholder text is never parsed as a template."""
        resolver = VariantResolver(language_type, placeholder_text="{missing}")
        analyzed = analyzer.analyze(resolver.resolve_field(FieldDef(name="dummy")))

        assert analyzed.templates["English"].constant_text == "{missing}"

    def test_template_error_in_filled_field(self, analyzer, resolve):
        """Test malformed authored templates fail even when other variants are fine."""
        field = FieldDef(name="greeting", templates={"English": "Hello", "French": "Bonjour {"})
        with pytest.raises(TemplateSyntaxError, match="variant 'French'"):
            analyzer.analyze(resolve(field))
