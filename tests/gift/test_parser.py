from datetime import datetime

from gift.parser import DEFAULT_CONTENT, DEFAULT_TITLE, parse, parse_question
from gift.paths import ROOT_CATEGORY_NAME, ROOT_ID
from models.question import QuestionKind


def _by_name(categories):
    return {c.name: c for c in categories}


class TestParseCategories:
    """Tests for $CATEGORY: handling."""

    def test_always_has_top_category(self):
        """Test that the top category exists even for empty input."""
        categories, questions = parse("")

        assert len(categories) == 1
        assert categories[0].id == ROOT_ID
        assert categories[0].name == ROOT_CATEGORY_NAME
        assert categories[0].parent_id is None
        assert questions == []

    def test_category_path_creates_chain(self):
        """Test the Math/Algebra example end to end."""
        text = "$CATEGORY: top/Math/Algebra\n\n::Q::[html]2+2?{\n=4\n~5\n}"

        categories, questions = parse(text)

        by_name = _by_name(categories)
        assert by_name["Math"].parent_id == ROOT_ID
        assert by_name["Algebra"].parent_id == by_name["Math"].id

        assert len(questions) == 1
        question = questions[0]
        assert question.category_id == by_name["Algebra"].id
        assert question.kind == QuestionKind.MULTIPLE_CHOICE
        assert len(question.choices) == 2
        correct = [c for c in question.choices if c.is_correct]
        assert len(correct) == 1
        assert correct[0].text == "4"

    def test_repeated_path_reused(self):
        """Test that the same path twice does not duplicate categories."""
        text = "$CATEGORY: A/B\n\n::Q1::x{}\n\n$CATEGORY: A/B\n\n::Q2::y{}"

        categories, questions = parse(text)

        assert [c.name for c in categories] == [ROOT_CATEGORY_NAME, "A", "B"]
        assert questions[0].category_id == questions[1].category_id

    def test_top_directive_returns_to_root(self):
        """Test that $CATEGORY: top switches back to the top category."""
        text = "$CATEGORY: A\n\n::Q1::x{}\n\n$CATEGORY: top\n\n::Q2::y{}"

        _, questions = parse(text)

        assert questions[1].category_id == ROOT_ID

    def test_directive_flushes_pending_question(self):
        """Test a directive in the middle of a chunk."""
        text = "::Q1::first{}\n$CATEGORY: Later\n::Q2::second{}"

        categories, questions = parse(text)

        later = _by_name(categories)["Later"]
        assert [q.name for q in questions] == ["Q1", "Q2"]
        assert questions[0].category_id == ROOT_ID
        assert questions[1].category_id == later.id

    def test_questions_before_any_directive(self):
        """Test that questions default to the top category."""
        _, questions = parse("::Q::x{=a}")
        assert questions[0].category_id == ROOT_ID

    def test_exported_comment_and_directive_in_one_chunk(self):
        """Test the comment line the exporter writes above a directive."""
        text = "// question: 0  name: Switch category to Math\n$CATEGORY: Math"

        categories, questions = parse(text)

        assert [c.name for c in categories] == [ROOT_CATEGORY_NAME, "Math"]
        assert questions == []


class TestParseQuestions:
    """Tests for question body handling."""

    def test_essay(self):
        """Test that an empty body gives an essay with no choices."""
        _, questions = parse("::Essay::[html]<p>Discuss.</p>{\n}")

        question = questions[0]
        assert question.kind == QuestionKind.ESSAY
        assert question.choices == []
        assert question.content == "<p>Discuss.</p>"

    def test_placeholders(self):
        """Test the default title and content."""
        _, questions = parse("{=a}")

        assert questions[0].name == DEFAULT_TITLE
        assert questions[0].content == DEFAULT_CONTENT

    def test_format_tag_removed(self):
        """Test that a bracketed format tag is not part of the content."""
        _, questions = parse("::T::[markdown]Text{}")
        assert questions[0].content == "Text"

    def test_content_unescaped_then_sanitized(self):
        """Test that content is unescaped and stripped of styling."""
        _, questions = parse(r'::T::[html]<p style="x">a \= b \{c\}</p>{}')
        assert questions[0].content == "<p>a = b {c}</p>"

    def test_title_unescaped(self):
        """Test that escaped characters in the title are restored."""
        _, questions = parse(r"::Ratio 1\:2::text{}")
        assert questions[0].name == "Ratio 1:2"

    def test_feedback_discarded(self):
        """Test that text after # in a choice is dropped."""
        _, questions = parse("::T::q{\n=Paris#Correct!\n~Lyon#No\n}")

        choices = questions[0].choices
        assert [c.text for c in choices] == ["Paris", "Lyon"]
        assert [c.is_correct for c in choices] == [True, False]

    def test_escaped_marker_stays_in_choice(self):
        """Test that \\= inside a choice does not start a new choice."""
        _, questions = parse(r"::T::q{=1 \= 1~2}")

        assert [c.text for c in questions[0].choices] == ["1 = 1", "2"]

    def test_choice_html_sanitized(self):
        """Test that choice text goes through the sanitizer."""
        _, questions = parse(r'::T::q{=<b class\="x">yes</b>}')
        assert questions[0].choices[0].text == "<b>yes</b>"

    def test_empty_choices_dropped(self):
        """Test that markers with no text are ignored."""
        _, questions = parse("::T::q{=a ~ ~b}")
        assert [c.text for c in questions[0].choices] == ["a", "b"]

    def test_unsupported_answers_dropped(self):
        """Test that answer text without =/~ leaves no choices."""
        _, questions = parse("::T::q{TRUE}")

        assert questions[0].kind == QuestionKind.MULTIPLE_CHOICE
        assert questions[0].choices == []

    def test_multiple_correct_choices_kept(self):
        """Test that several = choices all stay correct."""
        _, questions = parse("::T::Primes{=2 =3 ~4}")
        assert [c.is_correct for c in questions[0].choices] == [True, True, False]

    def test_body_runs_to_last_brace(self):
        """Test that the body spans the first { to the last }."""
        _, questions = parse("::T::q{=a}\n~b}")
        assert [c.text for c in questions[0].choices] == ["a}", "b"]

    def test_missing_closing_brace_is_lenient(self):
        """Test that an unterminated body still parses."""
        _, questions = parse("::T::q{\n=a\n~b")
        assert [c.text for c in questions[0].choices] == ["a", "b"]

    def test_comment_block_skipped(self):
        """Test that a chunk of comments only is not a question."""
        _, questions = parse("// just a note\n// another")
        assert questions == []

    def test_block_without_braces_skipped(self):
        """Test that text with no answer braces is not a question."""
        _, questions = parse("some stray text")
        assert questions == []

    def test_comment_above_question_ignored(self):
        """Test that the exporter's comment line is not part of the content."""
        _, questions = parse("// question: q_1  name: Sum\n::Sum::[html]x{=1}")

        assert questions[0].name == "Sum"
        assert questions[0].content == "x"

    def test_ids_unique(self):
        """Test that every question and choice gets a fresh id."""
        _, questions = parse("::A::x{=1 ~2}\n\n::B::y{=1 ~2}")

        ids = [q.id for q in questions] + [c.id for q in questions for c in q.choices]
        assert len(ids) == len(set(ids))
        assert all(q.id.startswith("q_") for q in questions)

    def test_crlf_input(self):
        """Test that Windows line endings parse like Unix ones."""
        _, questions = parse("::A::x{\r\n=1\r\n~2\r\n}\r\n\r\n::B::y{}")

        assert [q.name for q in questions] == ["A", "B"]
        assert [c.text for c in questions[0].choices] == ["1", "2"]


class TestParseQuestion:
    """Tests for parse_question."""

    def test_uses_given_timestamp(self):
        """Test that the creation timestamp can be fixed by the caller."""
        created = datetime(2024, 1, 2, 3, 4, 5)
        question = parse_question(["::T::x{}"], "cat_1", created)

        assert question.created_at == created
        assert question.category_id == "cat_1"

    def test_comments_only(self):
        """Test that comment lines alone give no question."""
        assert parse_question(["// x"], ROOT_ID) is None
