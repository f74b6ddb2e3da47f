"""Tests for transcript record parsing and version block segmentation."""

import pytest

from osv_triage.yarn_why.extractor import (
    ChainExtractor,
    DependsOnItStrategy,
    ReasonsListStrategy,
    TreeWalkStrategy,
    strip_quotes,
    walk_first_children,
)
from osv_triage.yarn_why.normalizer import cap, deduplicate, join_chains, normalize_chain
from osv_triage.yarn_why.records import (
    InfoRecord,
    ListRecord,
    RecordKind,
    StepRecord,
    TreeNode,
    TreeRecord,
    UnknownRecord,
    parse_record,
    parse_records,
)
from osv_triage.yarn_why.segmenter import (
    SegmenterState,
    VersionBlockSegmenter,
    marker_matches_version,
    retained_records,
)


class TestParseRecord:

    def test_info(self):
        record = parse_record('{"type":"info","data":"Has been hoisted"}')
        assert record == InfoRecord(message="Has been hoisted")
        assert record.kind is RecordKind.INFO

    def test_reasons_list_drops_non_string_items(self):
        record = parse_record('{"type":"list","data":{"type":"reasons","items":["a", 3, null, "b"]}}')
        assert record == ListRecord(list_type="reasons", items=["a", "b"])

    def test_tree_with_null_and_missing_fields(self):
        record = parse_record('{"type":"tree","data":{"trees":[null,{"children":[{"name":"leaf"}]}]}}')
        assert isinstance(record, TreeRecord)
        assert record.trees[0] is None
        assert record.trees[1] == TreeNode(name="", children=[TreeNode(name="leaf")])

    def test_step(self):
        record = parse_record('{"type":"step","data":{"message":"Finding dependency"}}')
        assert isinstance(record, StepRecord)

    @pytest.mark.parametrize("line", [
        '{"type":"warning","data":"careful"}',
        '{"type":"info","data":{"not":"a string"}}',
        '{"type":"list","data":{"type":"reasons"}}',
        '{"type":"tree","data":"oops"}',
    ])
    def test_unrecognised_shapes_are_unknown(self, line):
        assert isinstance(parse_record(line), UnknownRecord)

    @pytest.mark.parametrize("line", [
        "",
        "invalid json line",
        "[1, 2, 3]",
        '"just a string"',
        '{"data":"no type"}',
        '{"type": 7, "data": "numeric type"}',
        "[" * 100000,
        '{"type":"info","data":' + '[' * 100000,
    ])
    def test_malformed_lines_dropped(self, line):
        assert parse_record(line) is None

    def test_parse_records_skips_malformed(self):
        text = '{"type":"info","data":"a"}\ngarbage\n{"type":"info","data":"b"}\n'
        assert [r.message for r in parse_records(text)] == ["a", "b"]


def info(message: str) -> InfoRecord:
    return InfoRecord(message=message)


class TestSegmenter:

    def test_starts_outside(self):
        assert VersionBlockSegmenter("1.0.0").state is SegmenterState.OUTSIDE

    def test_marker_included_in_block(self):
        marker = info('=> Found "a@1.0.0"')
        blocks = VersionBlockSegmenter("1.0.0").segment([marker, info("x")])
        assert blocks == [[marker, info("x")]]

    def test_non_matching_marker_closes_block(self):
        segmenter = VersionBlockSegmenter("1.0.0")
        segmenter.feed(info('=> Found "a@1.0.0"'))
        segmenter.feed(info("kept"))
        segmenter.feed(info('=> Found "a@2.0.0"'))
        assert segmenter.state is SegmenterState.OUTSIDE
        segmenter.feed(info("dropped"))
        blocks = segmenter.finish()
        assert blocks == [[info('=> Found "a@1.0.0"'), info("kept")]]

    def test_consecutive_matching_markers_make_separate_blocks(self):
        records = [info("=> Found a@1.0.0"), info("one"), info("=> Found b#a@1.0.0"), info("two")]
        blocks = VersionBlockSegmenter("1.0.0").segment(records)
        assert len(blocks) == 2
        assert blocks[1][-1] == info("two")

    def test_non_found_records_do_not_transition(self):
        records = [info("Found a@1.0.0 without arrow"), info("x")]
        assert VersionBlockSegmenter("1.0.0").segment(records) == []

    def test_retained_records_concatenates_blocks(self):
        records = [
            info("=> Found a@1.0.0"), info("first"),
            info("=> Found a@2.0.0"), info("other"),
            info("=> Found a@1.0.0"), info("second"),
        ]
        kept = retained_records(records, "1.0.0")
        assert [r.message for r in kept] == [
            "=> Found a@1.0.0", "first", "=> Found a@1.0.0", "second",
        ]

    def test_substring_version_match_is_preserved(self):
        assert marker_matches_version('=> Found "a@1.0.0"', "1.0")

    def test_exact_version_match(self):
        assert not marker_matches_version('=> Found "a@1.0.0"', "1.0", exact_version=True)
        assert marker_matches_version('=> Found "a@1.0"', "1.0", exact_version=True)
        assert marker_matches_version('=> Found a@1.0', "1.0", exact_version=True)
        assert marker_matches_version('=> Found "b@1.0.1" "a@1.0"', "1.0", exact_version=True)


class TestExtractor:

    def test_strip_quotes(self):
        assert strip_quotes('"a#b"') == "a#b"
        assert strip_quotes('Hoisted from "a#b"') == 'Hoisted from "a#b'
        assert strip_quotes('""') == ""

    def test_walk_first_children_null_child(self):
        assert walk_first_children(TreeNode(name="root", children=[None])) is None

    def test_walk_first_children_skips_empty_leading_names(self):
        root = TreeNode(name="", children=[TreeNode(name="b", children=[TreeNode(name="c")])])
        assert walk_first_children(root) == "b → c"

    def test_strategies_ignore_other_kinds(self):
        list_record = ListRecord(list_type="reasons", items=["a"])
        assert list(TreeWalkStrategy().extract(list_record)) == []
        assert list(DependsOnItStrategy().extract(list_record)) == []
        assert list(ReasonsListStrategy().extract(info('"x" depends on it'))) == []

    def test_extractor_unions_strategies_in_record_order(self):
        records = [
            TreeRecord(trees=[TreeNode(name="t")]),
            ListRecord(list_type="reasons", items=["r", "t"]),
            info('"d" depends on it'),
            StepRecord(data={}),
            UnknownRecord(type_name="warning"),
        ]
        assert ChainExtractor().extract(records) == ["t", "r", "d"]


class TestNormalizer:

    def test_normalize_chain(self):
        assert normalize_chain("_project_#a#b") == "a#b"
        assert normalize_chain("_project_#") is None
        assert normalize_chain("_project_#a#_project_#b") == "a#b"
        assert normalize_chain("_project__project_##a") == "a"
        assert normalize_chain("_project__project_##") is None
        assert normalize_chain("x workspace aggregator y") is None
        assert normalize_chain("workspace-aggregator-1#a") is None
        assert normalize_chain("a#b") == "a#b"

    def test_deduplicate_cap_join(self):
        chains = deduplicate(["a", "b", "a", "c", "d", "e", "f", "b"])
        assert chains == ["a", "b", "c", "d", "e", "f"]
        assert cap(chains) == ["a", "b", "c", "d", "e"]
        assert join_chains(["a", "b"]) == "a | b"
