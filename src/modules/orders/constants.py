"""Order domain constants.

Order statuses are not enumerated here: they live in the status registry
(``modules.statuses``) and ``Order.status`` holds a registry slug.
"""

ORDER_NUMBER_MAX_RETRIES = 5

# ``changed_by`` default for status changes made through the admin API.
DEFAULT_ACTOR = "Admin"
