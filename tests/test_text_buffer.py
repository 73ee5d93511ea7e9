import pytest

from macro_engine.buffer import Range, RangeBoundsError, RangeConflictError, TextBuffer


def make_buffer(text: str = "hello", **kwargs) -> TextBuffer:
    return TextBuffer(text, **kwargs)


def test_insert_returns_inserted_span() -> None:
    buffer = make_buffer()

    ranges = buffer.insert([3], ["XY"])

    assert buffer.get_text() == "helXYlo"
    assert ranges == [(3, 5)]


def test_remove_returns_collapsed_span() -> None:
    buffer = make_buffer()

    ranges = buffer.remove([(1, 3)])

    assert buffer.get_text() == "hlo"
    assert ranges == [(1, 1)]


def test_replace_output_ranges_locate_replacements() -> None:
    buffer = make_buffer("one two three four")
    replacements = ["1", "TWO!!", "", "4444"]

    ranges = buffer.replace([(0, 3), (4, 7), (8, 14), (14, 18)], replacements)

    assert buffer.get_text() == "1 TWO!! 4444"
    assert [buffer.get_range(rng) for rng in ranges] == replacements


def test_replace_matches_manual_splice() -> None:
    original = "alpha beta gamma"
    buffer = make_buffer(original)

    buffer.replace([(6, 10), (0, 5)], ["B", "A"])

    assert buffer.get_text() == "A" + original[5:6] + "B" + original[10:]


def test_replace_keeps_pairs_when_sorting() -> None:
    buffer = make_buffer()

    ranges = buffer.replace([(4, 5), (0, 1)], ["O", "H"])

    assert buffer.get_text() == "HellO"
    assert ranges == [Range(0, 1), Range(4, 5)]


def test_replace_overlap_raises_and_leaves_text() -> None:
    buffer = make_buffer("hello world")

    with pytest.raises(RangeConflictError) as info:
        buffer.replace([(0, 5), (3, 8)], ["a", "b"])

    assert info.value.first == 0
    assert info.value.second == 1
    assert info.value.first_range == (0, 5)
    assert info.value.second_range == (3, 8)
    assert buffer.get_text() == "hello world"


def test_replace_overlap_reports_caller_indices() -> None:
    buffer = make_buffer("hello world")

    with pytest.raises(RangeConflictError) as info:
        buffer.replace([(3, 8), (0, 5)], ["a", "b"])

    assert (info.value.first, info.value.second) == (1, 0)


def test_touching_ranges_are_allowed() -> None:
    buffer = make_buffer()

    ranges = buffer.replace([(0, 2), (2, 5)], ["HE", "LLO"])

    assert buffer.get_text() == "HELLO"
    assert ranges == [(0, 2), (2, 5)]


def test_zero_width_ranges_at_same_point_apply_in_order() -> None:
    buffer = make_buffer()

    ranges = buffer.insert([5, 5], ["a", "b"])

    assert buffer.get_text() == "helloab"
    assert ranges == [(5, 6), (6, 7)]


def test_replace_rejects_mismatched_lengths() -> None:
    buffer = make_buffer()

    with pytest.raises(ValueError):
        buffer.replace([(0, 1), (2, 3)], ["x"])


@pytest.mark.parametrize("bad", [(3, 1), (-1, 2), (2, 6)])
def test_replace_rejects_out_of_bounds(bad) -> None:
    buffer = make_buffer()

    with pytest.raises(RangeBoundsError):
        buffer.replace([bad], ["x"])

    assert buffer.get_text() == "hello"


def test_empty_batch_is_a_no_op() -> None:
    buffer = make_buffer()

    assert buffer.replace([], []) == []
    assert buffer.get_text() == "hello"


def test_get_text_is_idempotent() -> None:
    buffer = make_buffer()

    assert buffer.get_text() == buffer.get_text() == buffer.text == str(buffer)


def test_checkpoints_record_prior_texts_in_order() -> None:
    buffer = make_buffer("first")

    buffer.mark_undo_point()
    buffer.set_text("second")
    buffer.mark_undo_point()
    buffer.set_text("third")
    buffer.mark_undo_point()
    buffer.set_text("latest")

    assert buffer.checkpoints == ["first", "second", "third"]
    assert buffer.get_text() == "latest"


def test_set_text_without_debug_mode_takes_no_checkpoint() -> None:
    buffer = make_buffer()

    buffer.set_text("changed")

    assert len(buffer.checkpoints) == 0


def test_debug_mode_checkpoints_every_set_text() -> None:
    buffer = make_buffer("a", debug_mode=True)

    buffer.set_text("b")
    buffer.set_text("c")

    assert list(buffer.checkpoints) == ["a", "b"]
    assert buffer.get_text() == "c"


def test_ranged_edits_do_not_checkpoint() -> None:
    buffer = make_buffer(debug_mode=True)

    buffer.insert([0], [">"])

    assert len(buffer.checkpoints) == 0
    assert buffer.get_text() == ">hello"
