"""Fixed names shared by the export and import sides of a site package."""

# Files inside a package directory
EXPORT_MANIFEST_NAME = "export.xml"
EXPORT_DB_NAME = "export.dnndb"
EXPORT_ZIP_DB_NAME = "export_db.zip"

# Root element of the manifest document
MANIFEST_PACKAGE_TAG = "package"
MANIFEST_PACKAGE_ID_TAG = "PackageId"
MANIFEST_PACKAGE_NAME_TAG = "PackageName"
MANIFEST_PACKAGE_DESCRIPTION_TAG = "PackageDescription"

# Content category labels
CATEGORY_ASSETS = "Assets"
CATEGORY_CONTENT = "Content"
CATEGORY_PACKAGES = "Packages"
CATEGORY_PAGES = "Pages"
CATEGORY_PROFILE_PROPERTIES = "ProfileProperties"
CATEGORY_ROLES = "Roles"
CATEGORY_TEMPLATES = "Templates"
CATEGORY_THEMES = "Themes"
CATEGORY_USERS = "Users"
CATEGORY_VOCABULARIES = "Vocabularies"
CATEGORY_WORKFLOWS = "Workflows"

# Prefix of every message returned for a package that exists but cannot be read
INVALID_PACKAGE_MESSAGE = "Package is not valid. Technical Details:"

# Event type recorded when an import job is queued
LOG_TYPE_SITE_IMPORT = "SITE_IMPORT"
