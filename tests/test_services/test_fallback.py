"""Tests for deterministic fallback output."""

from app.schemas.descriptor import ColumnDescriptor, SchemaDescriptor, TableDescriptor
from app.services.fallback import OVERVIEW_TITLE, fallback_dashboards, fallback_insights


class TestFallbackInsights:
    """Test schema-only insights."""

    def test_empty_schema_alert(self, empty_schema):
        """No tables should yield exactly one alert."""
        insights = fallback_insights(empty_schema)

        assert len(insights) == 1
        assert insights[0].type == "alert"
        assert insights[0].title == "No Data Available"

    def test_one_insight_per_table(self, inventory_schema):
        """Every table up to the cap should get an overview insight."""
        insights = fallback_insights(inventory_schema)

        assert [i.title for i in insights] == [
            "products overview",
            "sales overview",
            "categories overview",
            "customers overview",
        ]
        assert [i.type for i in insights] == ["summary", "trend", "summary", "trend"]
        assert all(i.confidence == 1.0 for i in insights)

    def test_counts_in_description_and_data(self, products_schema):
        """Insights should state row and column counts."""
        insight = fallback_insights(products_schema)[0]

        assert "15,420 rows" in insight.description
        assert "7 columns" in insight.description
        assert insight.data == {"rows": 15420, "columns": 7}

    def test_table_cap(self):
        """Only the first max_tables tables should be covered."""
        schema = SchemaDescriptor(
            tables=[TableDescriptor(name=f"t{i}", row_count=i) for i in range(10)]
        )

        assert len(fallback_insights(schema)) == 4
        assert len(fallback_insights(schema, max_tables=6)) == 6


class TestFallbackDashboards:
    """Test the overview dashboard."""

    def test_empty_schema(self, empty_schema):
        """No tables should yield no dashboards."""
        assert fallback_dashboards(empty_schema) == []

    def test_table_widget_per_table(self, inventory_schema):
        """Every table should get a table widget with its sample rows."""
        dashboards = fallback_dashboards(inventory_schema)

        assert len(dashboards) == 1
        assert dashboards[0].title == OVERVIEW_TITLE
        widgets = dashboards[0].widgets
        assert [w.id for w in widgets] == [
            "table-products",
            "table-sales",
            "table-categories",
            "table-customers",
        ]
        assert all(w.type == "table" for w in widgets)
        assert widgets[2].data == [{"id": 1, "name": "Electronics"}, {"id": 3, "name": "Audio"}]

    def test_table_without_rows(self):
        """A table with no sample rows should still get a widget."""
        schema = SchemaDescriptor(
            tables=[
                TableDescriptor(
                    name="audit_log",
                    columns=[ColumnDescriptor(name="id", type="INT")],
                )
            ]
        )

        dashboards = fallback_dashboards(schema)

        assert len(dashboards[0].widgets) == 1
        assert dashboards[0].widgets[0].data == []

    def test_deterministic(self, inventory_schema):
        """The same schema should always give the same fallbacks."""
        assert fallback_dashboards(inventory_schema) == fallback_dashboards(inventory_schema)
        assert fallback_insights(inventory_schema) == fallback_insights(inventory_schema)

    def test_ragged_sample_rows(self):
        """Rows with differing keys should share one column set, gaps as None."""
        schema = SchemaDescriptor(
            tables=[TableDescriptor(name="t", sample_rows=[{"a": 1}, {"a": 2, "b": None}])]
        )

        widget = fallback_dashboards(schema)[0].widgets[0]

        assert widget.data == [{"a": 1, "b": None}, {"a": 2, "b": None}]
        assert widget.columns == ["a", "b"]

    def test_rows_follow_column_order(self):
        """Declared columns should lead, with missing values filled in."""
        schema = SchemaDescriptor(
            tables=[
                TableDescriptor(
                    name="orders",
                    columns=[
                        ColumnDescriptor(name="id", type="INT"),
                        ColumnDescriptor(name="total", type="NUMERIC"),
                    ],
                    sample_rows=[{"total": 9.5, "id": 1}, {"id": 2}],
                )
            ]
        )

        widget = fallback_dashboards(schema)[0].widgets[0]

        assert widget.columns == ["id", "total"]
        assert widget.data == [{"id": 1, "total": 9.5}, {"id": 2, "total": None}]

    def test_blank_table_name(self):
        """A whitespace table name should still give a titled widget."""
        schema = SchemaDescriptor(tables=[TableDescriptor(name=" ", sample_rows=[{"a": 1}])])

        widget = fallback_dashboards(schema)[0].widgets[0]

        assert widget.title == "Table 1"
        assert widget.id == "table- "
        assert widget.data == [{"a": 1}]
