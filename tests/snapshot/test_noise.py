"""Tests for skeleton keys and refresh noise filtering."""

from axwatch.snapshot.diff import compute_diff
from axwatch.snapshot.noise import filter_genuine, skeleton
from axwatch.snapshot.types import AXDiff


class TestSkeleton:
    """Tests for skeleton()."""

    def test_role_and_stable_id(self):
        """Skeleton is role|d=<id>."""
        assert skeleton("button|label=Play|d=1") == "button|d=1"

    def test_stable_id_in_any_position(self):
        """d= may appear before other fields."""
        assert skeleton("text|d=1|v=Hello") == "text|d=1"

    def test_no_stable_id(self):
        """Lines without d= have an empty skeleton."""
        assert skeleton("StaticText|t=12:30 PM") == ""

    def test_first_stable_id_wins(self):
        """Only the first d= field is used."""
        assert skeleton("Group|d=a|t=x|d=b") == "Group|d=a"

    def test_role_only(self):
        """A line with no delimiter has an empty skeleton."""
        assert skeleton("Window") == ""

    def test_empty_line(self):
        """Empty lines do not raise."""
        assert skeleton("") == ""

    def test_key_must_be_exactly_d(self):
        """Fields like dx= or id= are not stable ids."""
        assert skeleton("Slider|dx=4|id=7") == ""

    def test_d_as_role_is_not_an_id(self):
        """The role field itself is never treated as the id."""
        assert skeleton("d=1|t=x") == ""

    def test_empty_id_still_counts(self):
        """An empty d= value is still a stable-id field."""
        assert skeleton("Button|d=") == "Button|d="


class TestFilterGenuine:
    """Tests for filter_genuine()."""

    def test_refresh_noise_cancelled(self):
        """Same element with new text is noise."""
        diff = compute_diff(["button|label=Play|d=1"], ["button|label=Pause|d=1"])
        assert diff == AXDiff(
            added=["button|label=Pause|d=1"], removed=["button|label=Play|d=1"]
        )
        assert filter_genuine(diff) == []

    def test_genuine_new_element(self):
        """A new stable id with no matching removal is genuine."""
        diff = compute_diff(["text|d=1|v=Hello"], ["text|d=1|v=Hello", "text|d=2|v=World"])
        assert diff == AXDiff(added=["text|d=2|v=World"], removed=[])
        assert filter_genuine(diff) == ["text|d=2|v=World"]

    def test_pure_ui_refresh(self):
        """Scrollbar, button label and clock updates all cancel."""
        diff = AXDiff(
            added=[
                "Button|t=垂直小幅下降 (2)|d=VerticalSmallDecrease",
                "ScrollBar|t=垂直|v=280|d=ScrollBar",
                "StaticText|t=12:31 PM|d=ClockText",
            ],
            removed=[
                "Button|t=垂直小幅下降|d=VerticalSmallDecrease",
                "ScrollBar|t=垂直|v=274|d=ScrollBar",
                "StaticText|t=12:30 PM|d=ClockText",
            ],
        )
        assert filter_genuine(diff) == []

    def test_real_messages_pass(self):
        """Nothing removed means everything added is genuine."""
        added = ["StaticText|t=Alice: Got it", "StaticText|t=Alice: See you tomorrow", "Group|t=Alice"]
        assert filter_genuine(AXDiff(added=added, removed=[])) == added

    def test_mixed_noise_and_messages(self):
        """Noise is cancelled, real messages are kept in order."""
        diff = AXDiff(
            added=[
                "ScrollBar|t=垂直|v=300|d=ScrollBar",
                "Button|t=关闭标签页 (2)|d=CloseButton",
                "StaticText|t=Bob: New message!",
                "StaticText|t=10:05 AM",
            ],
            removed=[
                "ScrollBar|t=垂直|v=274|d=ScrollBar",
                "Button|t=关闭标签页|d=CloseButton",
            ],
        )
        assert filter_genuine(diff) == ["StaticText|t=Bob: New message!", "StaticText|t=10:05 AM"]

    def test_lines_without_stable_id_never_cancelled(self):
        """Lines without d= pass through even with removals of the same role."""
        diff = AXDiff(
            added=["StaticText|t=Hello", "Group|t=SomeGroup"],
            removed=["StaticText|t=Goodbye", "Group|t=OtherGroup"],
        )
        assert filter_genuine(diff) == ["StaticText|t=Hello", "Group|t=SomeGroup"]

    def test_cancellation_is_one_to_one(self):
        """One removed skeleton cancels only one added line."""
        diff = AXDiff(
            added=["Cell|t=a|d=c1", "Cell|t=b|d=c1"],
            removed=["Cell|t=old|d=c1"],
        )
        assert filter_genuine(diff) == ["Cell|t=b|d=c1"]

    def test_same_id_different_role_not_cancelled(self):
        """Skeleton includes the role."""
        diff = AXDiff(added=["Button|t=x|d=1"], removed=["Link|t=x|d=1"])
        assert filter_genuine(diff) == ["Button|t=x|d=1"]

    def test_windows_value_change(self):
        """Text field value change with stable id is noise; new clock line is not."""
        before = [
            "Button|t=Send|d=sendBtn",
            "TextField|t=Message|v=|d=inputField",
            "StaticText|t=12:30 PM",
        ]
        after = [
            "Button|t=Send|d=sendBtn",
            "TextField|t=Message|v=Hello!|d=inputField",
            "StaticText|t=12:30 PM",
            "StaticText|t=12:31 PM",
            "StaticText|t=Alice: Got it",
        ]
        diff = compute_diff(before, after)
        assert len(diff.added) == 3
        assert len(diff.removed) == 1
        assert filter_genuine(diff) == ["StaticText|t=12:31 PM", "StaticText|t=Alice: Got it"]

    def test_unchanged_when_no_skeleton_matches(self):
        """With no matching skeletons the added list comes back unchanged."""
        diff = AXDiff(
            added=["b|d=2", "c|t=x", "a|d=9"],
            removed=["b|d=3", "a|t=y"],
        )
        assert filter_genuine(diff) == diff.added

    def test_does_not_mutate_diff(self):
        """filter_genuine leaves its input intact."""
        diff = AXDiff(added=["b|t=new|d=1"], removed=["b|t=old|d=1"])
        filter_genuine(diff)
        assert diff == AXDiff(added=["b|t=new|d=1"], removed=["b|t=old|d=1"])
