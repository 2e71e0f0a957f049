"""
Demo schema for the department query examples.

The employees table backs the web lookup; the parent/child tables back
the batched delete. Parent 20 has three children, 30 has none and 50 has
one, so the default row-count batch reports [3, 0, 1].
"""

DEMO_SCHEMA_DDL = [
    "DROP TABLE IF EXISTS em_childtab",
    "DROP TABLE IF EXISTS em_parenttab",
    "DROP TABLE IF EXISTS employees",
    """CREATE TABLE employees (
        employee_id   INTEGER PRIMARY KEY,
        first_name    VARCHAR(20),
        last_name     VARCHAR(25) NOT NULL,
        department_id INTEGER
    )""",
    """CREATE TABLE em_parenttab (
        parentid    INTEGER PRIMARY KEY,
        description VARCHAR(60) NOT NULL
    )""",
    """CREATE TABLE em_childtab (
        childid     INTEGER PRIMARY KEY,
        parentid    INTEGER NOT NULL REFERENCES em_parenttab (parentid),
        description VARCHAR(30) NOT NULL
    )""",
]

INSERT_EMPLOYEE_SQL = (
    "INSERT INTO employees (employee_id, first_name, last_name, department_id) "
    "VALUES (%s, %s, %s, %s)"
)
INSERT_PARENT_SQL = "INSERT INTO em_parenttab (parentid, description) VALUES (%s, %s)"
INSERT_CHILD_SQL = "INSERT INTO em_childtab (childid, parentid, description) VALUES (%s, %s, %s)"

DEMO_EMPLOYEES = [
    (100, "Steven", "King", 90),
    (101, "Neena", "Kochhar", 90),
    (103, "Alexander", "Hunold", 60),
    (104, "Bruce", "Ernst", 60),
    (105, "David", "Austin", 60),
    (114, "Den", "Raphaely", 30),
    (115, "Alexander", "Khoo", 30),
    (178, "Kimberely", "Grant", None),
]

DEMO_PARENTS = [
    (10, "Parent 10"),
    (20, "Parent 20"),
    (30, "Parent 30"),
    (40, "Parent 40"),
    (50, "Parent 50"),
]

DEMO_CHILDREN = [
    (1001, 10, "Child 1001 of Parent 10"),
    (1002, 20, "Child 1002 of Parent 20"),
    (1003, 20, "Child 1003 of Parent 20"),
    (1004, 20, "Child 1004 of Parent 20"),
    (1005, 40, "Child 1005 of Parent 40"),
    (1006, 10, "Child 1006 of Parent 10"),
    (1007, 40, "Child 1007 of Parent 40"),
    (1008, 50, "Child 1008 of Parent 50"),
]
