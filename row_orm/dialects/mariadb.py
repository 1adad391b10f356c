"""MariaDB dialect.

MariaDB stores JSON as LONGTEXT and shares MySQL's spatial functions.
"""

from __future__ import annotations

from row_orm.dialects.mysql import MySQLDialect, MySQLSpatialDialect


class MariaDBDialect(MySQLDialect):
    name = "mariadb"


class MariaDBSpatialDialect(MySQLSpatialDialect):
    name = "mariadb_spatial"
