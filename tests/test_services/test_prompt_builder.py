"""Tests for prompt rendering."""

from app.services.prompt_builder import build_dashboard_prompt, build_insight_prompt


class TestPromptBuilder:
    """Test schema rendering into prompts."""

    def test_prompts_are_deterministic(self, inventory_schema):
        """Rendering the same schema twice should give identical text."""
        assert build_insight_prompt(inventory_schema) == build_insight_prompt(inventory_schema)
        assert build_dashboard_prompt(inventory_schema) == build_dashboard_prompt(inventory_schema)

    def test_insight_prompt_content(self, products_schema):
        """The insight prompt should carry names, counts, columns and samples."""
        prompt = build_insight_prompt(products_schema)

        assert "- Table: products" in prompt
        assert "Rows: 15420" in prompt
        assert "Columns: id, name, brand, price, cost, stock_quantity, category_id" in prompt
        assert '"name": "WH-1000XM5"' in prompt
        assert "Respond with ONLY a JSON array" in prompt

    def test_insight_prompt_sample_limit(self, products_schema):
        """Only the requested number of sample rows should be rendered."""
        prompt = build_insight_prompt(products_schema, sample_rows=2)

        assert "Galaxy S24" in prompt
        assert "WH-1000XM5" not in prompt

    def test_dashboard_prompt_structure(self, inventory_schema):
        """The dashboard prompt should describe columns and references, not rows."""
        prompt = build_dashboard_prompt(inventory_schema)

        assert "- Table: products (15420 rows)" in prompt
        assert "    - id (INT) PRIMARY KEY, NOT NULL" in prompt
        assert "    - category_id (INT) FOREIGN KEY, NULL" in prompt
        assert "References: sales.product_id -> products.id" in prompt
        assert "iPhone 15" not in prompt
        assert '"chartType"' in prompt

    def test_table_order_is_preserved(self, inventory_schema):
        """Tables should appear in discovery order."""
        prompt = build_dashboard_prompt(inventory_schema)
        positions = [prompt.index(f"- Table: {name} ") for name in inventory_schema.list_tables()]

        assert positions == sorted(positions)

    def test_empty_schema(self, empty_schema):
        """An empty schema should still produce both prompts."""
        assert "(no tables were discovered)" in build_insight_prompt(empty_schema)
        assert "(no tables were discovered)" in build_dashboard_prompt(empty_schema)
