"""
Integration tests for loading the CSV dataset into a store.
"""

import logging
from pathlib import Path

import pytest

from recipe_planner.csv_loader import (
    QuoteMode,
    load_recipes,
    load_recipes_from_csv,
    seed_store_if_empty,
)
from recipe_planner.data.memory_store import InMemoryRecipeStore

FIXTURE_CSV = Path(__file__).parent.parent / "fixtures" / "indian_food_sample.csv"


class TestLoadFromCsv:
    """Test loading the sample dataset file."""

    def test_loads_every_record(self, store):
        loaded = load_recipes_from_csv(FIXTURE_CSV, store)

        assert loaded == 4
        assert store.count() == 4

    def test_loaded_fields(self, store):
        load_recipes_from_csv(FIXTURE_CSV, store)

        karela, tomato_rice, dal, chicken = store.find_all()

        assert karela.name == "Masala Karela Recipe"
        assert karela.cuisine == "Indian"
        assert karela.total_time_mins == 45
        assert karela.instruction_count == 3
        assert karela.raw_ingredients.startswith("1 tablespoon Red Chilli powder")
        assert karela.source_url == "https://www.archanaskitchen.com/masala-karela-recipe"
        assert karela.image_url == "https://www.archanaskitchen.com/images/masala-karela.jpg"
        assert karela.is_seeded()

        assert tomato_rice.name == "Spicy Tomato Rice (Recipe)"
        assert tomato_rice.cuisine == "South Indian Recipes"
        assert dal.total_time_mins == 30
        assert dal.instructions == [
            "Pressure cook the dal",
            "Temper with ghee and cumin",
            "Serve hot",
        ]
        assert chicken.instructions[-1] == "Garnish"

    def test_ids_are_assigned_in_file_order(self, store):
        load_recipes_from_csv(FIXTURE_CSV, store)

        ids = [r.id for r in store.find_all()]

        assert ids == sorted(ids)
        assert store.find_by_id(ids[0]).name == "Masala Karela Recipe"

    @pytest.mark.parametrize("batch_size", [1, 3, 500])
    def test_batch_size_does_not_change_result(self, memory_store, batch_size):
        loaded = load_recipes_from_csv(FIXTURE_CSV, memory_store, batch_size=batch_size)

        assert loaded == 4
        assert memory_store.count() == 4

    def test_missing_file(self, store, tmp_path, caplog):
        loaded = load_recipes_from_csv(tmp_path / "nope.csv", store)

        assert loaded == 0
        assert store.count() == 0
        assert "CSV file not found" in caplog.text

    def test_store_required(self):
        with pytest.raises(ValueError):
            load_recipes_from_csv(FIXTURE_CSV, None)


class TestMalformedRows:
    """One bad record never stops the rest of the load."""

    def test_quoted_comma_and_embedded_newline(self, memory_store, write_csv):
        path = write_csv([
            'Dal,"lentil, 1 cup",40,North Indian,"Cook dal.\nServe hot."',
        ])

        assert load_recipes_from_csv(path, memory_store) == 1

        recipe = memory_store.find_all()[0]
        assert recipe.name == "Dal"
        assert recipe.raw_ingredients == "lentil, 1 cup"
        assert recipe.total_time_mins == 40
        assert recipe.cuisine == "North Indian"
        assert recipe.instructions == ["Cook dal", "Serve hot"]

    def test_short_and_unnamed_rows_skipped(self, memory_store, write_csv, caplog):
        path = write_csv([
            "Poha,rice flakes,20,Indian,Rinse the poha well",
            "Broken,row",
            'X,"salt",10,Indian,Mix everything together',
            "Upma,semolina,abc,South Indian,Roast the semolina",
        ])

        with caplog.at_level(logging.WARNING):
            loaded = load_recipes_from_csv(path, memory_store)

        assert loaded == 2
        assert [r.name for r in memory_store.find_all()] == ["Poha", "Upma"]
        assert memory_store.find_all()[1].total_time_mins == 30
        assert "Skipped 2 malformed records" in caplog.text

    def test_unterminated_quote_discarded(self, memory_store, write_csv, caplog):
        path = write_csv([
            "Poha,rice flakes,20,Indian,Rinse the poha well",
            'Upma,"semolina,15,South Indian,Roast the semolina',
        ])

        loaded = load_recipes_from_csv(path, memory_store)

        assert loaded == 1
        assert memory_store.find_all()[0].name == "Poha"

    def test_blank_lines_ignored(self, memory_store, write_csv):
        path = write_csv(["", "Poha,rice flakes,20,Indian,Rinse the poha well", ""])

        assert load_recipes_from_csv(path, memory_store) == 1

    def test_header_only(self, memory_store, write_csv):
        assert load_recipes_from_csv(write_csv([]), memory_store) == 0

    def test_crlf_line_endings(self, memory_store, tmp_path):
        path = tmp_path / "windows.csv"
        path.write_bytes(
            b"header\r\nPoha,rice flakes,20,Indian,\"Rinse the poha.\r\nServe warm.\"\r\n"
        )

        assert load_recipes_from_csv(path, memory_store) == 1
        assert memory_store.find_all()[0].instructions == ["Rinse the poha", "Serve warm"]


class TestLoadRecipes:
    """Test loading from an in-memory line source."""

    def test_lines_from_list(self, memory_store):
        lines = [
            "header",
            'Chana Masala,"chickpeas, onion",35,Punjabi,"Soak chickpeas. Cook with masala."',
        ]

        assert load_recipes(lines, memory_store) == 1
        assert memory_store.find_all()[0].instruction_count == 2

    def test_rfc4180_mode_keeps_doubled_quotes(self, memory_store):
        lines = [
            "header",
            'Kheer,"1 cup ""basmati"" rice",40,Indian,"Simmer the milk until thick"',
        ]

        load_recipes(lines, memory_store, mode=QuoteMode.RFC4180)

        assert memory_store.find_all()[0].raw_ingredients == '1 cup "basmati" rice'

    def test_rfc4180_oversized_field_is_skipped(self, memory_store, caplog):
        """A field past the csv module's size limit skips only that record."""
        lines = [
            "header",
            "Poha,rice flakes,20,Indian,Rinse the poha well",
            'Big,"' + "x" * 200000 + '",10,Indian,Stir until it thickens',
            "Upma,semolina,15,South Indian,Roast the semolina",
        ]

        loaded = load_recipes(lines, memory_store, mode=QuoteMode.RFC4180)

        assert loaded == 2
        assert [r.name for r in memory_store.find_all()] == ["Poha", "Upma"]
        assert "Skipped 1 malformed records" in caplog.text


class TestSeedStore:
    """Test the one-time seeding step."""

    def test_seed_empty_store(self, store):
        assert seed_store_if_empty(store, FIXTURE_CSV) == 4
        assert store.count() == 4

    def test_seed_twice_is_noop(self, store):
        seed_store_if_empty(store, FIXTURE_CSV)

        assert seed_store_if_empty(store, FIXTURE_CSV) == 0
        assert store.count() == 4

    def test_seed_with_rfc4180_mode(self, memory_store, write_csv):
        path = write_csv([
            'Kheer,"1 cup ""basmati"" rice",40,Indian,"Simmer the milk until thick"',
        ])

        assert seed_store_if_empty(memory_store, path, mode=QuoteMode.RFC4180) == 1
        assert memory_store.find_all()[0].raw_ingredients == '1 cup "basmati" rice'

    def test_seed_skipped_when_store_has_recipes(self, sample_recipe):
        store = InMemoryRecipeStore()
        store.create(sample_recipe)

        assert seed_store_if_empty(store, FIXTURE_CSV) == 0
        assert store.count() == 1
