package_name = "trieve-cli"
package_version = "0.1.0"

PACKAGE_VERSION = package_version
