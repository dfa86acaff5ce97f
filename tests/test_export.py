"""Tests for the export orchestrator."""
import asyncio

from tokens.errors import DiagnosticKind, SourceUnavailable
from tokens.export import ExportStatus, export_color_tokens
from tokens.models import AliasReference, ModeDescriptor, VariableCollection, VariableRecord
from tokens.source import InMemoryVariableSource


def _export(source, **kwargs):
    return asyncio.run(export_color_tokens(source, **kwargs))


def _alias_source(values_a, values_b):
    collection = VariableCollection(
        id='C1', modes=[ModeDescriptor('m1', 'Mode 1')], variable_ids=['A', 'B'], default_mode_id='m1'
    )
    return InMemoryVariableSource([collection], [
        VariableRecord(id='A', name='color/a', values_by_mode=values_a, collection_id='C1'),
        VariableRecord(id='B', name='color/b', values_by_mode=values_b, collection_id='C1'),
    ])


class BrokenSource(InMemoryVariableSource):
    async def list_collections(self):
        raise SourceUnavailable("host unavailable")


class SlowSource(InMemoryVariableSource):
    async def get_variable(self, variable_id):
        await asyncio.sleep(5)
        return await super().get_variable(variable_id)


class FlakySource(InMemoryVariableSource):
    def __init__(self, *args, failing_id=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.failing_id = failing_id

    async def get_variable(self, variable_id):
        if variable_id == self.failing_id:
            raise RuntimeError("lookup failed")
        return await super().get_variable(variable_id)


class CountingSource(InMemoryVariableSource):
    """Tracks how many get_variable calls are in flight at once."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.in_flight = 0
        self.max_in_flight = 0

    async def get_variable(self, variable_id):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0)
        self.in_flight -= 1
        return await super().get_variable(variable_id)


class TestExportColorTokens:

    def test_builds_tree_across_collections(self, themed_source):
        result = _export(themed_source)

        assert result.tree.to_dict() == {
            'palette': {
                'red': {'value': '#ff0000ff', 'type': 'color'},
                'blue': {'value': '#0000ffff', 'type': 'color'},
            },
            'color': {
                'background': {
                    'light': {'value': '#ffffffff', 'type': 'color'},
                    'dark': {'value': '#000000ff', 'type': 'color'},
                },
                'accent': {
                    'dark': {'value': '#0000ffff', 'type': 'color'},
                },
            },
        }

    def test_non_color_variables_are_skipped_silently(self, themed_source):
        result = _export(themed_source)
        assert result.variable_count == 4
        assert all(d.name != 'spacing/sm' for d in result.diagnostics)

    def test_alias_makes_export_partial(self, themed_source):
        result = _export(themed_source)

        assert result.status == ExportStatus.PARTIAL
        assert result.ok
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].kind == DiagnosticKind.UNRESOLVED_ALIAS
        assert result.diagnostics[0].mode_id == '1:0'

    def test_lines(self, themed_source):
        result = _export(themed_source)
        assert result.lines == [
            'palette-red: #ff0000ff',
            'palette-blue: #0000ffff',
            'color-background-light: #ffffffff',
            'color-background-dark: #000000ff',
            'color-accent-dark: #0000ffff',
        ]

    def test_message(self, themed_source):
        assert _export(themed_source).message.startswith("Exported 5 color tokens from 4 variables")

    def test_empty_source_is_success(self):
        result = _export(InMemoryVariableSource())
        assert result.status == ExportStatus.SUCCESS
        assert result.tree.to_dict() == {}
        assert result.message == "No color variables to export"

    def test_only_skipped_values_is_partial(self):
        collection = VariableCollection(
            id='C1', modes=[ModeDescriptor('m1', 'Mode 1')], variable_ids=['A'], default_mode_id='m1'
        )
        source = InMemoryVariableSource([collection], [
            VariableRecord(id='A', name='color/a', values_by_mode={'m1': AliasReference('B')}, collection_id='C1'),
        ])
        result = _export(source)

        assert result.status == ExportStatus.PARTIAL
        assert result.token_count == 0
        assert result.message != "No color variables to export", "skipped values must not read as an empty file"
        assert "1 skipped values" in result.message


class TestAliasResolution:

    def test_resolves_across_collections(self, themed_source):
        result = _export(themed_source, resolve_aliases=True)

        assert result.status == ExportStatus.SUCCESS
        assert result.tree.to_dict()['color']['accent'] == {
            'light': {'value': '#ff0000ff', 'type': 'color'},
            'dark': {'value': '#0000ffff', 'type': 'color'},
        }

    def test_resolves_chains(self):
        source = _alias_source({'m1': AliasReference('B')}, {'m1': {'r': 0, 'g': 1, 'b': 0}})
        result = _export(source, resolve_aliases=True)
        assert result.tree.to_dict()['color']['a'] == {'value': '#00ff00ff', 'type': 'color'}

    def test_cycle_is_reported_not_raised(self):
        source = _alias_source({'m1': AliasReference('B')}, {'m1': AliasReference('A')})
        result = _export(source, resolve_aliases=True)

        assert result.status == ExportStatus.PARTIAL
        assert result.tree.to_dict() == {}
        kinds = {(d.variable_id, d.kind) for d in result.diagnostics}
        assert kinds == {('A', DiagnosticKind.UNRESOLVED_ALIAS), ('B', DiagnosticKind.UNRESOLVED_ALIAS)}
        assert len(result.diagnostics) == 2, "each unresolved value should be reported once"

    def test_missing_target(self):
        source = _alias_source({'m1': AliasReference('Z')}, {'m1': {'r': 1}})
        result = _export(source, resolve_aliases=True)
        assert 'not found' in result.diagnostics[0].message
        assert result.tree.to_dict() == {'color': {'b': {'value': '#ff0000ff', 'type': 'color'}}}


class TestFailures:

    def test_enumeration_failure_returns_empty_tree(self):
        result = _export(BrokenSource())

        assert result.status == ExportStatus.FAILED
        assert not result.ok
        assert result.tree.to_dict() == {}
        assert isinstance(result.error, SourceUnavailable)
        assert result.message == "Export failed: host unavailable"

    def test_deadline(self, themed_source):
        source = SlowSource(
            list(asyncio.run(themed_source.list_collections())),
            [asyncio.run(themed_source.get_variable('VariableID:2:1'))]
        )
        result = _export(source, fetch_timeout=0.05)

        assert result.status == ExportStatus.FAILED
        assert 'timed out' in result.message

    def test_single_fetch_failure_is_partial(self, themed_source):
        collections = asyncio.run(themed_source.list_collections())
        variables = [asyncio.run(themed_source.get_variable(vid)) for c in collections for vid in c.variable_ids]
        source = FlakySource(collections, variables, failing_id='VariableID:2:2')

        result = _export(source)

        assert result.status == ExportStatus.PARTIAL
        assert 'blue' not in result.tree.to_dict()['palette']
        failed = [d for d in result.diagnostics if d.kind == DiagnosticKind.SOURCE_UNAVAILABLE]
        assert [d.variable_id for d in failed] == ['VariableID:2:2']

    def test_missing_variable_is_reported(self):
        collection = VariableCollection(id='C1', modes=[ModeDescriptor('m1', 'Mode 1')], variable_ids=['gone'])
        result = _export(InMemoryVariableSource([collection], []))
        assert result.diagnostics[0].variable_id == 'gone'


class TestConcurrency:

    def test_variables_are_fetched_concurrently(self, themed_source):
        collections = asyncio.run(themed_source.list_collections())
        variables = [asyncio.run(themed_source.get_variable(vid)) for c in collections for vid in c.variable_ids]
        source = CountingSource(collections, variables)

        result = _export(source)

        assert source.max_in_flight > 1, "variable lookups should fan out"
        assert result.tree.to_dict() == _export(themed_source).tree.to_dict()
