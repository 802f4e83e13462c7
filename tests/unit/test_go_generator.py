"""Tests for Go metadata enrichment and rendering."""

import pytest

from dbtogo.codegen import generate_from_tables
from dbtogo.codegen.core.config import ConfigError, GeneratorConfig
from dbtogo.codegen.core.generator import GeneratorError, generate_code
from dbtogo.codegen.core.naming import NameCollisionError
from dbtogo.codegen.core.schema import SemanticType
from dbtogo.codegen.languages.go.generator import GoGenerator, create_go_generator
from dbtogo.introspect.base import RawColumn, RawTable

USERS_OUTPUT = """\
package model

// Code generated by dbtogo; DO NOT EDIT.
// ---args: dbtogo "sqlite3"

var InsertStmts = map[string]string{
\t"Users": "INSERT INTO Users (Id,Name,Email) VALUES (:Id,:Name,:Email)",
}

type Users struct {
\tId int64
\tName string
\tEmail string
}
"""

USERS_FULL = """\
package model

// Code generated by dbtogo; DO NOT EDIT.
// ---args: dbtogo "sqlite3"

// Arger is implemented by every generated table type.
type Arger interface {
\tArgs() []interface{}
}

var InsertStmts = map[string]string{
\t"Users": "INSERT INTO Users (Id,Name,Email) VALUES (?,?,?)",
}

var SelectStmts = map[string]string{
\t"Users": "SELECT Id,Name,Email FROM Users",
}

type Users struct {
\tId int64
\tName string
\tEmail string
}

func (t *Users) Args() []interface{} {
\treturn []interface{}{&t.Id, &t.Name, &t.Email}
}
"""


def _generator(**options):
    return GoGenerator(GeneratorConfig(format_output=False, **options))


def _types(struct):
    return {f.clean_name: f.type_expr for f in struct.fields}


class TestCreate:
    def test_clean_names_and_statements(self, make_metadata, users_table):
        metadata = _generator().create(make_metadata([users_table]))
        users = metadata.structs[0]

        assert users.clean_name == "Users"
        assert [f.clean_name for f in users.fields] == ["Id", "Name", "Email"]
        assert users.insert_stmt == "INSERT INTO Users (Id,Name,Email) VALUES (?,?,?)"
        assert users.select_stmt == "SELECT Id,Name,Email FROM Users"
        assert metadata.insert_stmts == [users.insert_stmt]
        assert metadata.select_stmts == [users.select_stmt]

    def test_declaration_and_accessor(self, make_metadata, users_table):
        users = _generator().create(make_metadata([users_table])).structs[0]

        assert users.declaration == (
            "type Users struct {\n\tId int64\n\tName string\n\tEmail string\n}"
        )
        assert users.accessor == (
            "func (t *Users) Args() []interface{} {\n"
            "\treturn []interface{}{&t.Id, &t.Name, &t.Email}\n"
            "}"
        )

    def test_bare_types(self, make_metadata, posts_table):
        metadata = _generator().create(make_metadata([posts_table]))

        assert _types(metadata.structs[0]) == {
            "Id": "int64",
            "Title": "string",
            "Tags": "[]string",
            "Created_at": "time.Time",
            "Body": "[]byte",
            "Score": "float64",
            "Published": "bool",
        }
        assert metadata.sorted_imports() == ["time"]

    def test_null_types(self, make_metadata, posts_table):
        metadata = _generator(null_policy="null").create(make_metadata([posts_table]))

        assert _types(metadata.structs[0]) == {
            "Id": "sql.NullInt64",
            "Title": "sql.NullString",
            "Tags": "[]string",
            "Created_at": "*time.Time",
            "Body": "[]byte",
            "Score": "sql.NullFloat64",
            "Published": "sql.NullBool",
        }
        assert metadata.sorted_imports() == ["database/sql", "time"]

    def test_pointer_types(self, make_metadata, posts_table):
        metadata = _generator(null_policy="pointer").create(
            make_metadata([posts_table])
        )

        assert _types(metadata.structs[0]) == {
            "Id": "*int64",
            "Title": "*string",
            "Tags": "[]string",
            "Created_at": "*time.Time",
            "Body": "[]byte",
            "Score": "*float64",
            "Published": "*bool",
        }
        assert metadata.sorted_imports() == ["time"]

    def test_no_imports_without_external_types(self, make_metadata, users_table):
        metadata = _generator().create(make_metadata([users_table]))
        assert metadata.imports == set()

    def test_struct_tags(self, make_metadata, posts_table):
        posts = _generator(struct_tags=True).create(make_metadata([posts_table])).structs[0]
        assert '\tCreated_at time.Time `sql:"created_at"`' in posts.declaration

    def test_struct_tag_quotes_column_name(self, make_metadata):
        table = RawTable("t", [RawColumn('we"ird', SemanticType.string())])
        struct = _generator(struct_tags=True).create(make_metadata([table])).structs[0]

        assert '\tWe_ird string `sql:"we\\"ird"`' in struct.declaration

    def test_struct_tag_with_backtick(self, make_metadata):
        table = RawTable("t", [RawColumn("a`b", SemanticType.string())])
        struct = _generator(struct_tags=True).create(make_metadata([table])).structs[0]

        assert '\tA_b string "sql:\\"a`b\\""' in struct.declaration

    def test_underscore_column(self, make_metadata):
        table = RawTable("t", [RawColumn("_", SemanticType.integer())])
        struct = _generator().create(make_metadata([table])).structs[0]

        assert struct.fields[0].clean_name == "Field"
        assert "&t.Field" in struct.accessor
        assert "&t._" not in struct.accessor

    def test_strip_underscores(self, make_metadata, posts_table):
        posts = _generator(strip_underscores=True).create(
            make_metadata([posts_table])
        ).structs[0]

        assert posts.get_field("created_at").clean_name == "Createdat"
        assert "Createdat" in posts.select_stmt

    def test_invalid_identifiers_are_cleaned(self, make_metadata):
        table = RawTable(
            "order items",
            [
                RawColumn("2nd-value", SemanticType.integer()),
                RawColumn("type", SemanticType.string()),
            ],
        )
        struct = _generator().create(make_metadata([table])).structs[0]

        assert struct.clean_name == "Order_items"
        assert [f.clean_name for f in struct.fields] == ["X2nd_value", "Type"]

    def test_column_collision(self, make_metadata):
        table = RawTable(
            "users",
            [RawColumn("name", SemanticType.string()), RawColumn("Name", SemanticType.string())],
        )

        with pytest.raises(NameCollisionError) as exc_info:
            _generator().create(make_metadata([table]))

        assert str(exc_info.value) == (
            "Names 'name' and 'Name' in table 'users' both map to 'Name'"
        )

    def test_collision_in_generation_result(self, make_metadata):
        table = RawTable(
            "users",
            [RawColumn("name", SemanticType.string()), RawColumn("Name", SemanticType.string())],
        )

        result = generate_code(_generator(), make_metadata([table]))

        assert not result.success
        assert result.code == ""
        assert result.error_message == (
            "Names 'name' and 'Name' in table 'users' both map to 'Name'"
        )

    def test_table_collision(self, make_metadata):
        tables = [RawTable("user"), RawTable("User")]

        with pytest.raises(NameCollisionError, match="in tables both map to 'User'"):
            _generator().create(make_metadata(tables))

    def test_suffix_policy(self, make_metadata):
        table = RawTable(
            "users",
            [RawColumn("name", SemanticType.string()), RawColumn("Name", SemanticType.string())],
        )
        struct = _generator(collision_policy="suffix").create(
            make_metadata([table])
        ).structs[0]

        assert [f.clean_name for f in struct.fields] == ["Name", "Name2"]
        assert struct.select_stmt == "SELECT Name,Name2 FROM Users"

    def test_same_column_name_in_different_tables(self, make_metadata):
        tables = [
            RawTable("a", [RawColumn("id", SemanticType.integer())]),
            RawTable("b", [RawColumn("id", SemanticType.integer())]),
        ]
        metadata = _generator().create(make_metadata(tables))

        assert [s.fields[0].clean_name for s in metadata.structs] == ["Id", "Id"]

    def test_create_twice(self, make_metadata, users_table):
        generator = _generator()
        metadata = make_metadata([users_table])

        generator.create(metadata)
        generator.create(metadata)

        assert len(metadata.insert_stmts) == 1
        assert len(metadata.struct_code) == 1

    def test_placeholder_style(self, make_metadata, users_table):
        users = _generator(placeholder="dollar").create(
            make_metadata([users_table])
        ).structs[0]
        assert users.insert_stmt.endswith("VALUES ($1,$2,$3)")


class TestRender:
    def test_default_output(self, make_metadata, users_table):
        result = generate_code(_generator(), make_metadata([users_table]))

        assert result.success
        assert result.code == USERS_OUTPUT

    def test_full_template(self, make_metadata, users_table):
        result = generate_code(
            _generator(entry_template="full"), make_metadata([users_table])
        )

        assert result.success
        assert result.code == USERS_FULL

    def test_imports_block(self, make_metadata, posts_table):
        result = generate_code(
            _generator(null_policy="null"), make_metadata([posts_table])
        )

        assert 'import (\n\t"database/sql"\n\t"time"\n)\n' in result.code

    def test_user_template(self, make_metadata, sample_tables, tmp_path):
        template = tmp_path / "names.tpl"
        template.write_text(
            "package {{ package }}\n"
            "{% for t in tables %}// {{ t.clean_name }} {{ t.name|typeify }}\n{% endfor %}"
        )
        result = generate_code(
            _generator(template_files=[str(template)]), make_metadata(sample_tables)
        )

        assert result.success
        assert result.code == "package model\n// Users User\n// Posts Post\n"

    def test_explicit_entry_among_user_files(self, make_metadata, users_table, tmp_path):
        first = tmp_path / "first.tpl"
        first.write_text("first")
        second = tmp_path / "second.tpl"
        second.write_text("second {% include 'first.tpl' %}")

        generator = _generator(
            template_files=[str(first), str(second)], entry_template="second.tpl"
        )
        result = generate_code(generator, make_metadata([users_table]))

        assert result.code == "second first"

    def test_unknown_entry(self, make_metadata, users_table):
        result = generate_code(
            _generator(entry_template="nope"), make_metadata([users_table])
        )

        assert not result.success
        assert result.error_message == "Template not found: nope"

    def test_go_helpers(self, make_metadata, posts_table):
        generator = _generator()
        generator.template_engine.add_template(
            "types.j2",
            "{% for f in tables[0].fields %}"
            "{{ f|typeof }} {{ f|typenull }} {{ f|typepointer }}\n"
            "{% endfor %}",
        )
        generator.config.entry_template = "types.j2"

        code = generator.generate(make_metadata([posts_table]))

        assert code.splitlines()[0] == "int64 sql.NullInt64 *int64"

    def test_deterministic(self, make_metadata, sample_tables):
        first = generate_code(_generator(), make_metadata(sample_tables))
        second = generate_code(_generator(), make_metadata(sample_tables))

        assert first.code == second.code

    def test_result_metadata(self, make_metadata, sample_tables):
        result = generate_code(_generator(), make_metadata(sample_tables))

        assert result.metadata["language"] == "go"
        assert result.metadata["table_count"] == 2
        assert result.metadata["field_count"] == 10
        assert result.metadata["imports"] == ["time"]


class TestWarnings:
    def test_zero_field_table(self, make_metadata):
        result = generate_code(
            _generator(entry_template="full"), make_metadata([RawTable("empty")])
        )

        assert result.success
        assert "INSERT INTO Empty () VALUES ()" in result.code
        assert result.warnings == [
            "Table 'empty' has no columns; its statements have empty column lists"
        ]

    def test_unrecognized_type(self, make_metadata):
        table = RawTable(
            "shapes",
            [RawColumn("geom", SemanticType.external("geometry"), "GEOMETRY")],
        )
        result = generate_code(_generator(), make_metadata([table]))

        assert "\tGeom interface{}" in result.code
        assert result.warnings == [
            "Column shapes.geom has unrecognized type 'GEOMETRY'; using interface{}"
        ]


class TestConfiguration:
    def test_type_overrides(self, make_metadata, users_table):
        metadata = _generator(custom={"int_type": "int"}).create(
            make_metadata([users_table])
        )
        assert metadata.structs[0].fields[0].type_expr == "int"

    def test_external_type_overrides(self, make_metadata):
        table = RawTable("keys", [RawColumn("id", SemanticType.external("uuid"))])
        generator = _generator(
            custom={"external_types": {"uuid": ["uuid.UUID", "github.com/google/uuid"]}}
        )
        metadata = generator.create(make_metadata([table]))

        assert metadata.structs[0].fields[0].type_expr == "uuid.UUID"
        assert metadata.imports == {"github.com/google/uuid"}

    @pytest.mark.parametrize(
        "option", ["null_policy", "placeholder", "collision_policy"]
    )
    def test_invalid_option(self, option):
        with pytest.raises(ConfigError, match=f"Invalid {option}"):
            _generator(**{option: "maybe"})

    def test_create_go_generator(self):
        generator = create_go_generator(package_name="db", null_policy="pointer")

        assert generator.config.package_name == "db"
        assert generator.language_name == "go"
        assert generator.file_extension == ".go"

    def test_create_go_generator_unknown_option(self):
        with pytest.raises(GeneratorError, match="Unknown generator option"):
            create_go_generator(colour="blue")


def test_generate_from_tables(sample_tables):
    result = generate_from_tables(
        sample_tables,
        GeneratorConfig(format_output=False, entry_template="full"),
        args=["dbtogo", '"sqlite3"'],
    )

    assert result.success
    assert '// ---args: dbtogo "sqlite3"\n' in result.code
    assert "func (t *Posts) Args() []interface{} {" in result.code
