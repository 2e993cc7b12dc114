from gift.exporter import export
from gift.paths import ROOT_ID
from models.category import Category
from tests.helpers import make_category, make_question, root_category


class TestExport:
    """Tests for export."""

    def test_essay_question_has_empty_braces(self):
        """Test a single category with one essay question."""
        categories = [Category(id="a", name="A", parent_id=None)]
        questions = [make_question("q_e1", "a", name="E", content="<p>Discuss.</p>", choices=None)]

        text = export(categories, questions)

        assert "$CATEGORY: A" in text
        assert "::E::[html]<p>Discuss.</p>{\n}" in text
        body = text.split("{", 1)[1]
        assert "=" not in body
        assert "~" not in body

    def test_multiple_choice_block(self):
        """Test the exact layout of a category and a multiple-choice question."""
        categories = [make_category("math", "Math", parent_id=None)]
        questions = [make_question("q_123456", "math")]

        text = export(categories, questions)

        assert text == (
            "// question: 0  name: Switch category to Math\n"
            "$CATEGORY: Math\n"
            "\n"
            "// question: q_12  name: Sum\n"
            "::Sum::[html]<p>2+2?</p>{\n"
            "\t=4\n"
            "\t~5\n"
            "}"
        )

    def test_blank_line_between_every_block(self):
        """Test that category and question blocks never run together."""
        categories = [
            make_category("a", "A", parent_id=None),
            make_category("b", "B", parent_id=None),
        ]
        questions = [make_question("q_1", "a"), make_question("q_2", "a")]

        blocks = export(categories, questions).split("\n\n")

        assert len(blocks) == 4
        assert blocks[0].endswith("$CATEGORY: A")
        assert blocks[3].endswith("$CATEGORY: B")

    def test_reserved_characters_escaped(self):
        """Test that title, content and choices are escaped."""
        categories = [make_category("a", "A", parent_id=None)]
        questions = [
            make_question(
                "q_1",
                "a",
                name="Ratio 1:2",
                content="<p>x = {y}</p>",
                choices=(("a~b", True), ("#5", False)),
            )
        ]

        text = export(categories, questions)

        assert r"::Ratio 1\:2::[html]<p>x \= \{y\}</p>{" in text
        assert "\t=a\\~b\n" in text
        assert "\t~\\#5\n" in text

    def test_name_and_choices_trimmed(self):
        """Test that surrounding whitespace of names and choices is dropped."""
        categories = [make_category("a", "A", parent_id=None)]
        questions = [make_question("q_1", "a", name="  Sum  ", choices=((" 4 ", True),))]

        text = export(categories, questions)

        assert "::Sum::" in text
        assert "\t=4\n" in text

    def test_multiline_content_flattened(self):
        """Test that content line breaks cannot end the block early."""
        categories = [make_category("a", "A", parent_id=None)]
        questions = [make_question("q_1", "a", content="<p>one</p>\n\n<p>two</p>")]

        text = export(categories, questions)

        assert "[html]<p>one</p> <p>two</p>{" in text

    def test_unicode_line_separators_flattened(self):
        """Test that form feeds and Unicode line separators are flattened too."""
        categories = [make_category("a", "A", parent_id=None)]
        questions = [
            make_question("q_1", "a", content="<p>a</p>\u2028\u2028<p>b</p>\x0c<p>c</p>")
        ]

        text = export(categories, questions)

        assert "[html]<p>a</p> <p>b</p> <p>c</p>{" in text
        assert "\u2028" not in text and "\x0c" not in text

    def test_trailing_backslash_does_not_escape_delimiters(self):
        """Test that a field ending in a backslash gets it doubled."""
        categories = [make_category("a", "A", parent_id=None)]
        questions = [
            make_question("q_1", "a", name="Dir\\", content="C:\\", choices=(("x\\", True),))
        ]

        text = export(categories, questions)

        assert r"::Dir\\::[html]C\:\\{" in text
        assert "\t=x\\\\\n}" in text

    def test_sentinel_written_as_top(self):
        """Test that the top category is exported as $CATEGORY: top."""
        categories = [root_category(), make_category("math", "Math")]
        questions = [make_question("q_1", ROOT_ID)]

        text = export(categories, questions)

        assert text.startswith("// question: 0  name: Switch category to top\n$CATEGORY: top\n")
        assert "$CATEGORY: Math" in text

    def test_context_prefix(self):
        """Test that the prefix is joined with a single slash."""
        categories = [root_category(), make_category("math", "Math")]

        text = export(categories, [], context_prefix="$course$/top/")

        assert "$CATEGORY: $course$/top\n" in text
        assert "$CATEGORY: $course$/top/Math" in text

    def test_scope_limits_to_subtree_in_pre_order(self):
        """Test that a scope exports the category and its descendants only."""
        categories = [
            root_category(),
            make_category("math", "Math"),
            make_category("bio", "Biology"),
            make_category("alg", "Algebra", "math"),
            make_category("geo", "Geometry", "math"),
            make_category("lin", "Linear", "alg"),
        ]
        questions = [make_question("q_bio", "bio"), make_question("q_lin", "lin")]

        text = export(categories, questions, scope="math")

        directives = [line for line in text.splitlines() if line.startswith("$CATEGORY:")]
        assert directives == [
            "$CATEGORY: Math",
            "$CATEGORY: Math/Algebra",
            "$CATEGORY: Math/Algebra/Linear",
            "$CATEGORY: Math/Geometry",
        ]
        assert "q_li" in text
        assert "q_bi" not in text

    def test_unknown_scope_exports_nothing(self):
        """Test that a scope id that does not exist gives empty output."""
        assert export([root_category()], [], scope="missing") == ""

    def test_questions_in_storage_order(self):
        """Test that questions keep their stored order within a category."""
        categories = [make_category("a", "A", parent_id=None)]
        questions = [
            make_question("q_b", "a", name="Second"),
            make_question("q_a", "a", name="First"),
        ]

        text = export(categories, questions)

        assert text.index("::Second::") < text.index("::First::")

    def test_cyclic_categories_skipped(self):
        """Test that categories without a resolvable path are skipped."""
        categories = [
            make_category("ok", "Fine", parent_id=None),
            Category(id="x", name="X", parent_id="y"),
            Category(id="y", name="Y", parent_id="x"),
        ]
        questions = [make_question("q_x", "x")]

        text = export(categories, questions)

        assert text == "// question: 0  name: Switch category to Fine\n$CATEGORY: Fine"

    def test_empty(self):
        """Test exporting nothing."""
        assert export([], []) == ""

    def test_inputs_not_modified(self):
        """Test that the caller's records are left alone."""
        categories = [make_category("a", " A ", parent_id=None)]
        questions = [make_question("q_1", "a", name=" Sum ")]

        export(categories, questions)

        assert categories[0].name == " A "
        assert questions[0].name == " Sum "
