from aggdef.compiler.compiler import AggregateCompiler
from aggdef.emit import dump_yaml
from aggdef.errors import AggregateError
import pprint
def main():

    with open("test_data/aggregates.agg", "r") as f:
        sample_source = f.read()

    compiler = AggregateCompiler()

    compiled = compiler.compile_source(sample_source, source="test_data/aggregates.agg")

    for c in compiled:
        pprint.pprint(c.descriptor)
        for fn in c.functions:
            print("   ", fn.signature())

    print(dump_yaml(compiled))

    broken_sources = [
        (
            "Missing state",
            r"""
                aggregate Broken {
                    type Args = int4;
                    const NAME = "broken";
                }
            """,
        ),
        (
            "Non-boolean HYPOTHETICAL",
            r"""
                aggregate Broken {
                    type Args = int4;
                    const NAME = "broken";
                    const HYPOTHETICAL = "yes";
                    def state;
                }
            """,
        ),
        (
            "Wrong capability",
            r"""
                aggregate Broken implements Window {
                    type Args = int4;
                    const NAME = "broken";
                    def state;
                }
            """,
        ),
    ]

    for desc, source in broken_sources:
        print(f"--- {desc} ---")
        try:
            compiler.compile_source(source)
        except AggregateError as e:
            print(f"Error compiling '{desc}': {e}")


if __name__ == "__main__":
    main()
