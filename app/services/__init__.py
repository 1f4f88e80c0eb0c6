# Services package.
#
#   product_service  — list/show/create/update/delete for Product
#
# Service functions take the request's AsyncSession as their first
# argument.  Writes open their own transaction scope (app.transactions);
# SQL itself lives in app.repository.
