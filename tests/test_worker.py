"""Tests for roux.worker - background recipe execution."""

import threading

from roux.dish import Dish
from roux.operations import OperationHandler
from roux.worker import BakeResult, RecipeWorker, RegisterUpdate


class TestRecipeWorker:
    """Tests for RecipeWorker."""

    def test_bake_returns_result(self, make_recipe):
        recipe = make_recipe([
            {"op": "Register", "args": [r"(\d+)-(\d+)", False, False]},
            {"op": "Append Text", "args": [" => $R1-$R0"]},
        ])
        with RecipeWorker(recipe) as worker:
            result = worker.bake("12-34").result(timeout=10)

        assert isinstance(result, BakeResult)
        assert result.success
        assert result.output == "12-34 => 34-12"
        assert result.output_type == Dish.STRING
        assert result.progress == 2
        assert result.registers == ["12", "34"]
        assert result.duration_ms >= 0

    def test_register_updates_published(self, make_recipe):
        recipe = make_recipe([
            {"op": "Append Text", "args": [""]},
            {"op": "Register", "args": [r"(\w)(\w)", False, False]},
        ])
        with RecipeWorker(recipe) as worker:
            worker.bake("ab").result(timeout=10)
            updates = worker.register_updates()

            assert updates == [RegisterUpdate(op_index=1, num_registers=0, registers=("a", "b"))]
            # Drained
            assert worker.register_updates() == []

    def test_repeated_bakes_start_from_compiled_args(self, make_recipe):
        recipe = make_recipe([
            {"op": "Register", "args": [r"(\w+)", False, False]},
            {"op": "Append Text", "args": ["=$R0"]},
        ])
        with RecipeWorker(recipe) as worker:
            first = worker.bake("x").result(timeout=10)
            second = worker.bake("y").result(timeout=10)

        assert first.output == "x=x"
        assert second.output == "y=y"
        assert recipe.op_list[1].ing_values == ["=$R0"]

    def test_recipe_error_reported(self, make_recipe):
        recipe = make_recipe([
            {"op": "Append Text", "args": ["!"]},
            {"op": "Fail On", "args": ["!"]},
        ])
        with RecipeWorker(recipe) as worker:
            result = worker.bake("a").result(timeout=10)

        assert not result.success
        assert result.progress == 1
        assert result.error.startswith("Fail On - ")
        assert result.output == "a!"

    def test_step_limit_reported(self, make_recipe):
        recipe = make_recipe([
            {"op": "Label", "args": ["a"]},
            {"op": "Jump", "args": ["a", 1000]},
        ])
        with RecipeWorker(recipe, max_steps=20) as worker:
            result = worker.bake("").result(timeout=10)

        assert not result.success
        assert result.error == "Step limit of 20 operations exceeded"

    def test_bytes_input(self, make_recipe):
        recipe = make_recipe([{"op": "To Hex", "args": [""]}])
        with RecipeWorker(recipe) as worker:
            result = worker.bake(b"\x01\xff", Dish.BYTE_ARRAY).result(timeout=10)
        assert result.output == "01ff"

    def test_runs_off_calling_thread(self, operations, make_recipe):
        seen = []

        class ThreadName(OperationHandler):
            name = "Thread Name"

            def run(self, input, args):
                seen.append(threading.current_thread().name)
                return input

        operations.register(ThreadName())
        recipe = make_recipe([{"op": "Thread Name"}])
        with RecipeWorker(recipe) as worker:
            worker.bake("x").result(timeout=10)

        assert seen and seen[0].startswith("roux-worker")
