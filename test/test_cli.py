import yaml

from conftest import declaration

from aggdef.__main__ import build_arg_parser, compile_files, main


def test_arguments():
    args = build_arg_parser().parse_args(["compile", "a.agg", "b.agg", "-o", "out.yaml", "--progress"])
    assert args.command == "compile"
    assert args.files == ["a.agg", "b.agg"]
    assert args.output == "out.yaml"
    assert args.progress
    assert not args.verbose


def test_compile_to_file(sample_file, tmp_path):
    out = tmp_path / "descriptors.yaml"
    assert main(["compile", str(sample_file), "-o", str(out)]) == 0
    document = yaml.safe_load(out.read_text())
    aggregates = document["aggregates"]
    assert [a["descriptor"]["name"] for a in aggregates] == ["demo_sum", "moving_avg", "top_k"]
    demo_sum = aggregates[0]
    assert demo_sum["descriptor"]["combine_function"] == "demo_sum_combine"
    assert demo_sum["descriptor"]["serial_function"] is None
    assert demo_sum["descriptor"]["parallel_marker"] == "Safe"
    assert demo_sum["functions"][0]["signature"] == "demo_sum_state(state: demo.DemoSum, arg_one: int4) -> demo.DemoSum"
    assert demo_sum["functions"][0]["attributes"] == ["immutable", "parallel_safe"]


def test_variadic_arguments_in_output(sample_file, tmp_path):
    out = tmp_path / "descriptors.yaml"
    main(["compile", str(sample_file), "-o", str(out)])
    top_k = yaml.safe_load(out.read_text())["aggregates"][2]["descriptor"]
    assert top_k["args"] == [
        {"name": "arg_one", "type": "int4"},
        {"name": "arg_two", "type": "Variadic<text>", "variadic": True, "element_type": "text"},
    ]
    assert top_k["state_type_name"] == "TopKState"


def test_compile_to_stdout(sample_file, capsys):
    assert main(["compile", str(sample_file)]) == 0
    document = yaml.safe_load(capsys.readouterr().out)
    assert len(document["aggregates"]) == 3


def test_failures_are_reported(sample_file, tmp_path, capsys):
    broken = tmp_path / "broken.agg"
    broken.write_text(declaration('type Args = int4; const NAME = "broken";'))
    assert main(["compile", str(sample_file), str(broken)]) == 1
    # the good declarations are still written
    document = yaml.safe_load(capsys.readouterr().out)
    assert len(document["aggregates"]) == 3


def test_missing_file(tmp_path):
    inventory, failures = compile_files([str(tmp_path / "missing.agg")])
    assert failures == 1
    assert len(inventory) == 0


def test_syntax_error(tmp_path):
    bad = tmp_path / "bad.agg"
    bad.write_text("aggregate {")
    inventory, failures = compile_files([str(bad)])
    assert failures == 1


def test_duplicate_across_files(sample_file):
    inventory, failures = compile_files([str(sample_file), str(sample_file)])
    assert len(inventory) == 3
    assert failures == 3


def test_config_file(sample_file, tmp_path):
    cfg = tmp_path / "aggdef.yaml"
    cfg.write_text("naming:\n  entity_prefix: agg_\nemit:\n  sort_keys: true\n")
    out = tmp_path / "out.yaml"
    assert main(["compile", str(sample_file), "--config", str(cfg), "-o", str(out)]) == 0
    entity_names = [a["descriptor"]["entity_name"] for a in yaml.safe_load(out.read_text())["aggregates"]]
    assert entity_names == ["agg_demo_sum", "agg_moving_avg", "agg_top_k"]


def test_skip_inventory_is_left_out(tmp_path):
    source = tmp_path / "mixed.agg"
    source.write_text(
        declaration('type Args = int4; const NAME = "shown"; def state;', target="Shown")
        + declaration('type Args = int4; const NAME = "hidden"; def state;', target="Hidden",
                      header="@skip_inventory")
    )
    inventory, failures = compile_files([str(source)])
    assert failures == 0
    assert [d.name for d in inventory.collect()] == ["shown"]
