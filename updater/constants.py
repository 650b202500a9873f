"""
Host protocol constants shared by the checker, the adapter plugin and routes.
"""

DAY_IN_SECONDS = 86400

# plugins_api action that asks for the details modal
ACTION_PLUGIN_INFORMATION = "plugin_information"

# upgrader_process_complete options
UPGRADE_ACTION_UPDATE = "update"
UPGRADE_TYPE_PLUGIN = "plugin"

# Outbound request headers for the manifest fetch
MANIFEST_REQUEST_HEADERS = {"Accept": "application/json"}
