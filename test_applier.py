"""
Tests for the sequential applier driving the structural splicer, and for the
export entry point.

Run: python3 test_applier.py
"""

import sys
from io import BytesIO

sys.path.insert(0, '.')

from docx import Document

from tailor.applier import SequentialApplier
from tailor.container import DocxContainer
from tailor.errors import MissingBodyEntryError, UnmatchedModificationWarning, ZeroAppliedWarning
from tailor.export import DEFAULT_FILENAME, modify_docx
from tailor.models import MatchTier, Modification, OutcomeStatus
from tailor.normalize import normalize
from tailor.splice.structural import StructuralSplicer


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _doc_to_bytes(doc):
    buf = BytesIO()
    doc.save(buf)
    return buf.getvalue()


def _make_doc(*paragraphs):
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    return _doc_to_bytes(doc)


def _texts(docx_bytes):
    return [p.text for p in Document(BytesIO(docx_bytes)).paragraphs]


def _run(docx_bytes, modifications, sort_by_length=True):
    """Applies modifications and returns (result, paragraph texts after the pass)."""
    container = DocxContainer.load(docx_bytes)
    splicer = StructuralSplicer.for_container(container)
    result = SequentialApplier(splicer, sort_by_length=sort_by_length).apply(modifications)
    splicer.release()
    return result, splicer.model.texts()


def _nonempty(texts):
    return [t for t in texts if t]


NESTED_PARAGRAPH = "Managed budget of $2M across three regional offices."
LONG = Modification(
    original_excerpt="Managed budget of $2M across three regional offices",
    new_content="Owned a $2M budget spanning three regional offices",
    reason="Ownership language",
)
SHORT = Modification(
    original_excerpt="budget of $2M",
    new_content="budget of $2.5M",
    reason="Updated figure",
)


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

def test_exact_replacement_removes_excerpt():
    source = _make_doc("Jane Doe", "Led a team of 5 engineers to deliver X.")
    mod = Modification(
        original_excerpt="Led a team of 5 engineers",
        new_content="Directed a cross-functional team of 5 engineers",
    )
    result, texts = _run(source, [mod])

    assert result.applied_count == 1
    joined = normalize(" ".join(texts))
    assert "led a team of 5 engineers" not in joined
    assert "directed a cross-functional team of 5 engineers" in joined

    outcome = result.outcomes[0]
    assert outcome.status is OutcomeStatus.APPLIED
    assert outcome.tier is MatchTier.EXACT
    assert texts[outcome.position] == "Directed a cross-functional team of 5 engineers"
    print("PASS: exact replacement removes excerpt")


def test_longest_first_keeps_nested_replacement_intact():
    source = _make_doc(NESTED_PARAGRAPH)
    # Input order is short-then-long; the applier must still apply long first.
    result, texts = _run(source, [SHORT, LONG])

    assert "Owned a $2M budget spanning three regional offices" in texts
    assert result.applied_count == 1
    assert result.outcomes[1].status is OutcomeStatus.APPLIED
    assert result.outcomes[0].status is OutcomeStatus.UNMATCHED
    print("PASS: longest-first keeps nested replacement intact")


def test_unsorted_order_corrupts_nested_replacement():
    """Without the sort, the short splice wins and the long rewrite is lost."""
    source = _make_doc(NESTED_PARAGRAPH)
    result, texts = _run(source, [SHORT, LONG], sort_by_length=False)

    assert "Owned a $2M budget spanning three regional offices" not in texts
    assert "budget of $2.5M" in texts
    assert result.outcomes[0].status is OutcomeStatus.APPLIED
    assert result.outcomes[1].status is OutcomeStatus.UNMATCHED
    print("PASS: unsorted order corrupts nested replacement")


def test_unmatched_item_does_not_stop_batch():
    """Scenario B: an absent excerpt is recorded, the rest still applies."""
    source = _make_doc("Built data pipelines in Python.", "Led a team of 5 engineers to deliver X.")
    mods = [
        Modification(original_excerpt="Managed Kubernetes clusters at planet scale", new_content="Ran Kubernetes"),
        Modification(original_excerpt="Led a team of 5 engineers", new_content="Directed a team of 5 engineers"),
    ]
    result, texts = _run(source, mods)

    assert result.total == 2
    assert result.applied_count == 1
    assert result.outcomes[0].status is OutcomeStatus.UNMATCHED
    assert result.outcomes[1].status is OutcomeStatus.APPLIED
    assert "Directed a team of 5 engineers" in texts
    assert "Built data pipelines in Python." in texts

    warnings = result.warnings
    assert len(warnings) == 1
    assert isinstance(warnings[0], UnmatchedModificationWarning)
    assert warnings[0].index == 0
    print("PASS: unmatched item does not stop batch")


def test_too_short_excerpt_is_skipped():
    source = _make_doc("Python developer with SQL experience")
    mods = [
        Modification(original_excerpt="  SQL  ", new_content="PostgreSQL"),
        Modification(original_excerpt="Python d", new_content="Senior Python developer"),
    ]
    result, texts = _run(source, mods)

    assert result.outcomes[0].status is OutcomeStatus.TOO_SHORT
    assert result.outcomes[1].status is OutcomeStatus.APPLIED
    assert _nonempty(texts) == ["Senior Python developer"]
    print("PASS: too-short excerpt skipped, boundary length applied")


def test_partial_match_applies():
    source = _make_doc("Increased revenue by 20% through targeted campaigns.")
    mod = Modification(
        original_excerpt="Increased revenue by 20% through targeted outreach programs",
        new_content="Grew revenue 20% via targeted campaigns",
    )
    result, texts = _run(source, [mod])
    assert result.applied_count == 1
    assert result.outcomes[0].tier is MatchTier.PARTIAL
    assert _nonempty(texts) == ["Grew revenue 20% via targeted campaigns"]
    print("PASS: partial match applies")


def test_leading_bullets_are_cleaned():
    source = _make_doc("Wrote unit tests for the billing service.")
    mod = Modification(
        original_excerpt="Wrote unit tests for the billing service",
        new_content="  • - Raised billing service coverage to 95%",
    )
    _, texts = _run(source, [mod])
    assert _nonempty(texts) == ["Raised billing service coverage to 95%"]
    print("PASS: leading bullets cleaned")


def test_zero_applied_is_a_warning_not_an_error():
    source = _make_doc("Jane Doe")
    mods = [Modification(original_excerpt="Completely unrelated sentence", new_content="x")]
    result, _ = _run(source, mods)

    assert result.applied_count == 0
    assert result.zero_applied
    assert any(isinstance(w, ZeroAppliedWarning) for w in result.warnings)

    empty, _ = _run(source, [])
    assert not empty.zero_applied
    assert empty.warnings == []
    print("PASS: zero applied is a warning")


def test_applied_count_never_exceeds_total():
    source = _make_doc("Alpha paragraph text", "Beta paragraph text")
    mods = [
        Modification(original_excerpt="Alpha paragraph", new_content="Gamma paragraph text"),
        Modification(original_excerpt="Alpha paragraph", new_content="Delta paragraph text"),
        Modification(original_excerpt="Beta paragraph", new_content="Epsilon paragraph text"),
    ]
    result, texts = _run(source, mods)
    assert result.applied_count <= result.total
    # The duplicate excerpt no longer exists after the first splice.
    assert result.outcomes[1].status is OutcomeStatus.UNMATCHED
    assert _nonempty(texts) == ["Gamma paragraph text", "Epsilon paragraph text"]
    print("PASS: applied count bounded by total")


def test_modify_docx_end_to_end():
    source = _make_doc("Jane Doe", "Led a team of 5 engineers to deliver X.", "Skills: SQL")
    mods = [
        Modification(
            original_excerpt="Led a team of 5 engineers",
            new_content="Directed a cross-functional team of 5 engineers",
            reason="Stronger verb",
            section="Experience",
        ),
        Modification(original_excerpt="Not in this document at all", new_content="x"),
    ]
    export = modify_docx(source, mods)

    assert export.filename == DEFAULT_FILENAME
    assert export.result.applied_count == 1
    assert export.result.total == 2
    texts = _texts(export.doc_bytes)
    assert "Directed a cross-functional team of 5 engineers" in texts
    assert "Jane Doe" in texts
    assert "Skills: SQL" in texts
    print("PASS: modify_docx end to end")


def test_modify_docx_rejects_missing_body():
    from zipfile import ZipFile

    buf = BytesIO()
    with ZipFile(buf, 'w') as zf:
        zf.writestr("[Content_Types].xml", "<Types/>")
    try:
        modify_docx(buf.getvalue(), [])
        assert False, "expected MissingBodyEntryError"
    except MissingBodyEntryError:
        pass
    print("PASS: modify_docx rejects missing body")


if __name__ == "__main__":
    tests = [
        test_exact_replacement_removes_excerpt,
        test_longest_first_keeps_nested_replacement_intact,
        test_unsorted_order_corrupts_nested_replacement,
        test_unmatched_item_does_not_stop_batch,
        test_too_short_excerpt_is_skipped,
        test_partial_match_applies,
        test_leading_bullets_are_cleaned,
        test_zero_applied_is_a_warning_not_an_error,
        test_applied_count_never_exceeds_total,
        test_modify_docx_end_to_end,
        test_modify_docx_rejects_missing_body,
    ]

    passed = 0
    failed = 0
    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"FAIL: {test.__name__}: {e}")
            import traceback
            traceback.print_exc()
            failed += 1

    print(f"\n{'='*60}")
    print(f"Results: {passed} passed, {failed} failed out of {len(tests)} tests")
    if failed == 0:
        print("ALL TESTS PASSED")
    else:
        print("SOME TESTS FAILED")
