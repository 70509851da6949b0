from __future__ import annotations

# Manifest headers
BUNDLE_MANIFESTVERSION = "Bundle-ManifestVersion"
BUNDLE_SYMBOLICNAME = "Bundle-SymbolicName"
BUNDLE_VERSION = "Bundle-Version"
EXPORT_PACKAGE = "Export-Package"
IMPORT_PACKAGE = "Import-Package"
DYNAMICIMPORT_PACKAGE = "DynamicImport-Package"
BUNDLE_NATIVECODE = "Bundle-NativeCode"

MANIFEST_VERSION_LEGACY = "1"
MANIFEST_VERSION_MODERN = "2"

# Attributes
VERSION_ATTRIBUTE = "version"
SPECIFICATION_VERSION_ATTRIBUTE = "specification-version"
BUNDLE_SYMBOLICNAME_ATTRIBUTE = "bundle-symbolic-name"
BUNDLE_VERSION_ATTRIBUTE = "bundle-version"

# Directives
USES_DIRECTIVE = "uses"
MANDATORY_DIRECTIVE = "mandatory"
RESOLUTION_DIRECTIVE = "resolution"
RESOLUTION_OPTIONAL = "optional"

# Bundle-NativeCode parameters
NATIVE_OSNAME = "osname"
NATIVE_PROCESSOR = "processor"
NATIVE_OSVERSION = "osversion"
NATIVE_LANGUAGE = "language"
NATIVE_SELECTION_FILTER = "selection-filter"
NATIVE_OPTIONAL_MARKER = "*"

# Packages under this prefix come from the platform and may not be wired.
RESERVED_PACKAGE_PREFIX = "java."

# Platform properties consulted by the native clause matcher
FRAMEWORK_OS_NAME = "org.osgi.framework.os.name"
FRAMEWORK_OS_VERSION = "org.osgi.framework.os.version"
FRAMEWORK_PROCESSOR = "org.osgi.framework.processor"
FRAMEWORK_LANGUAGE = "org.osgi.framework.language"
