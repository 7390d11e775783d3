"""
Example script to import tables from DDL and export them back to DDL.
"""

import logging

import ddlbridge


def main():
    logging.basicConfig(level=logging.DEBUG)

    with open("examples/sql/blog.sql", "r") as f:
        sql_str = f.read()

    print("--- Parsed tables ---")
    for table in ddlbridge.parse_sql(sql_str):
        print(table.name)
        for field in table.fields:
            print(f"  {field}")

    print("\n--- Editor tables ---")
    tables = ddlbridge.from_sql(sql_str)
    for table in tables:
        print(f"{table.name} {table.id} at {table.position}")

    print("\n--- Generated DDL ---")
    print(ddlbridge.to_sql(tables, if_not_exists=True, schema_name="public"))


if __name__ == "__main__":
    main()
