"""
Unit tests for `yarn why --json` transcript parsing.

Tests:
- Sentinels for missing and unparseable transcripts
- Reasons lists, dependency trees and "depends on it" messages
- Normalization, deduplication and capping
- Version block selection on a real cross-spawn transcript

Run with:
    pytest tests/yarn_why/test_yarn_why_parser.py -v
"""

import json

import pytest

from osv_triage.constants import NO_TRANSCRIPT_SENTINEL, UNPARSEABLE_OUTPUT_SENTINEL
from osv_triage.yarn_why import extract_chains, parse_yarn_why_output

CROSS_SPAWN_OUTPUT = r'''
{"type":"step","data":{"message":"Why do we have the module \"cross-spawn\"?","current":1,"total":4}}
{"type":"step","data":{"message":"Initialising dependency graph","current":2,"total":4}}
{"type":"step","data":{"message":"Finding dependency","current":3,"total":4}}
{"type":"step","data":{"message":"Calculating file sizes","current":4,"total":4}}
{"type":"info","data":"\r=> Found \"cross-spawn@7.0.6\""}
{"type":"info","data":"Has been hoisted to \"cross-spawn\""}
{"type":"info","data":"Reasons this module exists"}
{"type":"list","data":{"type":"reasons","items":["\"workspace-aggregator-0b89a0ba-b5d2-4e9b-b3c1-943ea9360c55\" depends on it","Hoisted from \"_project_#execa#cross-spawn\"","Hoisted from \"_project_#frontend#patch-package#cross-spawn\"","Hoisted from \"_project_#backend#argon2#cross-env#cross-spawn\"","Hoisted from \"_project_#backend#@nestjs-modules#mailer#glob#foreground-child#cross-spawn\""]}}
{"type":"info","data":"Disk size without dependencies: \"92KB\""}
{"type":"info","data":"Number of shared dependencies: 5"}
{"type":"info","data":"\r=> Found \"@prisma/generator-helper#cross-spawn@7.0.3\""}
{"type":"info","data":"This module exists because \"_project_#backend#prisma-dbml-generator#@prisma#generator-helper\" depends on it."}
{"type":"info","data":"Disk size without dependencies: \"68KB\""}
{"type":"info","data":"Number of shared dependencies: 5"}
{"type":"info","data":"\r=> Found \"run-applescript#cross-spawn@6.0.6\""}
{"type":"info","data":"Reasons this module exists"}
{"type":"list","data":{"type":"reasons","items":["\"_project_#backend#@nestjs-modules#mailer#preview-email#display-notification#run-applescript#execa\" depends on it","Hoisted from \"_project_#backend#@nestjs-modules#mailer#preview-email#display-notification#run-applescript#execa#cross-spawn\""]}}
{"type":"info","data":"Disk size without dependencies: \"68KB\""}
{"type":"info","data":"Number of shared dependencies: 7"}
'''


def found(name_version: str) -> str:
    return json.dumps({"type": "info", "data": f'\r=> Found "{name_version}"'})


def reasons(*items: str) -> str:
    return json.dumps({"type": "list", "data": {"type": "reasons", "items": list(items)}})


def tree(*roots) -> str:
    return json.dumps({"type": "tree", "data": {"trees": list(roots)}})


def transcript(*lines: str) -> str:
    return "\n".join(lines)


class TestSentinels:
    """Test the two failure outcomes."""

    @pytest.mark.parametrize("output", [None, "", "   \n  "])
    def test_missing_transcript(self, output):
        assert parse_yarn_why_output(output, "1.0.0") == NO_TRANSCRIPT_SENTINEL

    def test_unknown_records_only(self):
        output = '{"type":"unknown","data":"something"}'
        assert parse_yarn_why_output(output, "1.0.0") == UNPARSEABLE_OUTPUT_SENTINEL

    def test_well_formed_block_without_chains(self):
        output = transcript(
            found("package-a@1.0.0"),
            reasons(),
            tree(),
            '{"type":"info","data":"Disk size without dependencies: \\"92KB\\""}',
        )
        assert parse_yarn_why_output(output, "1.0.0") == UNPARSEABLE_OUTPUT_SENTINEL

    def test_garbage_transcript(self):
        assert parse_yarn_why_output("not json at all\n[1, 2]", "1.0.0") == UNPARSEABLE_OUTPUT_SENTINEL

    def test_deeply_nested_line_skipped(self):
        output = transcript(found("package-a@1.0.0"), "[" * 100000, reasons("package-b#package-a"))
        assert parse_yarn_why_output(output, "1.0.0") == "package-b#package-a"


class TestReasons:
    """Test chains taken from reasons lists."""

    def test_project_prefix_removed(self):
        output = transcript(
            found("package-a@1.0.0"),
            reasons("_project_#package-a", "package-b#package-a"),
            '{"type":"info","data":"Done"}',
        )
        assert parse_yarn_why_output(output, "1.0.0") == "package-a | package-b#package-a"

    def test_repeated_project_token_removed(self):
        output = transcript(found("a@1.0.0"), reasons("_project_#a#_project_#b", "_project__project_##c"))
        assert parse_yarn_why_output(output, "1.0.0") == "a#b | c"

    def test_quotes_stripped(self):
        output = transcript(found("package-a@1.0.0"), reasons('"_project_#package-a"'))
        assert parse_yarn_why_output(output, "1.0.0") == "package-a"

    def test_workspace_aggregator_filtered(self):
        output = transcript(
            found("package-a@1.0.0"),
            reasons("workspace aggregator of package-a", "project#package-a", "workspace-aggregator-123"),
        )
        assert parse_yarn_why_output(output, "1.0.0") == "project#package-a"

    def test_duplicates_removed(self):
        output = transcript(
            found("package-a@1.0.0"),
            reasons("package-b#package-a", "package-b#package-a", "package-c#package-a"),
        )
        assert parse_yarn_why_output(output, "1.0.0") == "package-b#package-a | package-c#package-a"

    def test_capped_at_five(self):
        output = transcript(
            found("package-a@1.0.0"),
            reasons("chain1", "chain2", "chain3", "chain4", "chain5", "chain6", "chain7"),
        )
        assert parse_yarn_why_output(output, "1.0.0") == "chain1 | chain2 | chain3 | chain4 | chain5"

    def test_other_list_types_ignored(self):
        output = transcript(
            found("package-a@1.0.0"),
            json.dumps({"type": "list", "data": {"type": "other", "items": ["nope"]}}),
        )
        assert parse_yarn_why_output(output, "1.0.0") == UNPARSEABLE_OUTPUT_SENTINEL


class TestTrees:
    """Test chains walked from dependency trees."""

    def test_nested_children(self):
        output = transcript(
            found("package-a@1.0.0"),
            tree({"name": "root", "children": [
                {"name": "package-b", "children": [{"name": "package-a@1.0.0"}]},
            ]}),
        )
        assert parse_yarn_why_output(output, "1.0.0") == "root → package-b → package-a@1.0.0"

    def test_only_first_child_followed(self):
        output = transcript(
            found("package-a@1.0.0"),
            tree({"name": "root", "children": [
                {"name": "first", "children": [{"name": "leaf"}]},
                {"name": "second"},
            ]}),
        )
        assert parse_yarn_why_output(output, "1.0.0") == "root → first → leaf"

    def test_null_roots_skipped(self):
        output = transcript(found("package-a@1.0.0"), tree(None, {"name": "valid-package"}))
        assert parse_yarn_why_output(output, "1.0.0") == "valid-package"

    def test_root_without_children(self):
        output = transcript(found("package-a@1.0.0"), tree({"name": "package-a@1.0.0"}))
        assert parse_yarn_why_output(output, "1.0.0") == "package-a@1.0.0"

    def test_tree_names_normalized(self):
        output = transcript(
            found("package-a@1.0.0"),
            tree({"name": "_project_#root", "children": [{"name": "package-a"}]}, {"name": "workspace-aggregator-1"}),
        )
        assert parse_yarn_why_output(output, "1.0.0") == "root → package-a"

    def test_numeric_names_kept(self):
        output = transcript(found("package-a@1.0.0"), tree({"name": 42, "children": [{"name": "package-a"}]}))
        assert parse_yarn_why_output(output, "1.0.0") == "42 → package-a"

    def test_mixed_reasons_and_trees(self):
        output = transcript(
            found("package-a@1.0.0"),
            reasons("reason-chain"),
            tree({"name": "tree-chain"}),
        )
        assert parse_yarn_why_output(output, "1.0.0") == "reason-chain | tree-chain"


class TestDependsOnIt:
    """Test chains quoted in info messages."""

    def test_exists_because_message(self):
        output = transcript(
            found("helper#package@1.0.0"),
            json.dumps({"type": "info", "data": 'This module exists because "_project_#dep-c#package" depends on it.'}),
        )
        assert parse_yarn_why_output(output, "1.0.0") == "dep-c#package"

    def test_plain_depends_on_it_message(self):
        output = transcript(
            found("package@1.0.0"),
            json.dumps({"type": "info", "data": '"dep-a#package" depends on it'}),
        )
        assert parse_yarn_why_output(output, "1.0.0") == "dep-a#package"

    def test_aggregator_message_filtered(self):
        output = transcript(
            found("package@1.0.0"),
            json.dumps({"type": "info", "data": '"workspace-aggregator-abc" depends on it'}),
        )
        assert parse_yarn_why_output(output, "1.0.0") == UNPARSEABLE_OUTPUT_SENTINEL


class TestVersionBlocks:
    """Test that only the target version contributes chains."""

    def test_multiple_occurrences(self):
        output = transcript(
            '{"type":"info","data":"=> Found package-a@1.0.0"}',
            reasons("version-1.0.0"),
            '{"type":"info","data":"=> Found package-a@2.0.0"}',
            reasons("version-2.0.0"),
            '{"type":"info","data":"=> Found package-a@1.0.0"}',
            reasons("another-1.0.0"),
        )
        assert parse_yarn_why_output(output, "1.0.0") == "version-1.0.0 | another-1.0.0"

    def test_records_before_any_marker_ignored(self):
        output = transcript(reasons("orphan"), found("package-a@1.0.0"), reasons("kept"))
        assert parse_yarn_why_output(output, "1.0.0") == "kept"

    def test_invalid_lines_skipped(self):
        output = transcript(
            '{"type":"info","data":"=> Found package-a@1.0.0"}',
            reasons("valid-chain"),
            "invalid json line",
            '{"type":"info","data":"Done"}',
        )
        assert parse_yarn_why_output(output, "1.0.0") == "valid-chain"

    def test_cross_spawn_7_0_3(self):
        chains = extract_chains(CROSS_SPAWN_OUTPUT, "7.0.3")
        assert chains == ["backend#prisma-dbml-generator#@prisma#generator-helper"]

    def test_cross_spawn_7_0_6(self):
        chains = extract_chains(CROSS_SPAWN_OUTPUT, "7.0.6")
        joined = " ".join(chains)
        assert len(chains) == 4
        assert "execa#cross-spawn" in joined
        assert "frontend#patch-package#cross-spawn" in joined
        assert "backend#argon2#cross-env#cross-spawn" in joined
        assert "generator-helper" not in joined
        assert "run-applescript" not in joined

    def test_cross_spawn_6_0_6(self):
        chains = extract_chains(CROSS_SPAWN_OUTPUT, "6.0.6")
        joined = " ".join(chains)
        assert "run-applescript#execa" in joined
        assert "execa#cross-spawn" in joined
        assert "generator-helper" not in joined


class TestProperties:
    """Properties holding for the real transcript and every version it mentions."""

    @pytest.mark.parametrize("version", ["7.0.6", "7.0.3", "6.0.6", "9.9.9"])
    def test_chain_properties(self, version):
        chains = extract_chains(CROSS_SPAWN_OUTPUT, version)
        assert len(chains) <= 5
        assert len(chains) == len(set(chains))
        for chain in chains:
            assert "_project_#" not in chain
            assert "workspace aggregator" not in chain
            assert "workspace-aggregator" not in chain

    def test_idempotent(self):
        first = parse_yarn_why_output(CROSS_SPAWN_OUTPUT, "7.0.6")
        second = parse_yarn_why_output(CROSS_SPAWN_OUTPUT, "7.0.6")
        assert first == second
