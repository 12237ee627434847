"""Tests for dependency parsers."""

import pytest

from dep_uplift.core.parsers import (
    CargoLockParser,
    CargoTomlParser,
    DotnetProjectParser,
    GemfileLockParser,
    GemfileParser,
    GoModParser,
    GoSumParser,
    GradleParser,
    PackageJsonParser,
    PackageLockParser,
    PipfileLockParser,
    PipfileParser,
    PnpmLockParser,
    PoetryLockParser,
    PomXmlParser,
    PyProjectParser,
    RequirementsParser,
    YarnLockParser,
    registry,
)
from dep_uplift.core.loaders import MAX_NESTING_DEPTH
from dep_uplift.core.parsers.base import MAX_DEPENDENCIES, resolve_version
from dep_uplift.core.types import DependencyType, Ecosystem


def by_type(groups):
    """Index parsed groups by dependency type."""
    return {group.dependency_type: group.dependencies for group in groups}


@pytest.fixture
def package_json():
    return """{
        "name": "test-project",
        "version": "1.0.0",
        "dependencies": {
            "lodash": "^4.17.19",
            "express": "~4.17.1"
        },
        "devDependencies": {
            "jest": "^27.0.0"
        },
        "peerDependencies": {
            "react": ">=17"
        }
    }"""


class TestResolveVersion:
    """Test resolution of string-or-table version declarations."""

    def test_plain_string(self):
        assert resolve_version("1.0") == "1.0"

    def test_table_with_version(self):
        assert resolve_version({"version": "1.0", "features": ["derive"]}) == "1.0"

    def test_table_without_version(self):
        """Test that path and git dependencies fall back to the wildcard."""
        assert resolve_version({"path": "../local"}) == "*"

    def test_missing_value(self):
        assert resolve_version(None) == "*"
        assert resolve_version("") == "*"


class TestPackageJsonParser:
    """Test Node.js package.json parser."""

    def test_parse_sections(self, package_json):
        """Test that each section maps to its dependency type."""
        groups = by_type(PackageJsonParser().parse(package_json))

        assert groups[DependencyType.PRODUCTION] == {"lodash": "^4.17.19", "express": "~4.17.1"}
        assert groups[DependencyType.DEVELOPMENT] == {"jest": "^27.0.0"}
        assert groups[DependencyType.PEER] == {"react": ">=17"}
        assert DependencyType.OPTIONAL not in groups

    def test_malformed_json(self):
        """Test that invalid JSON yields no groups instead of raising."""
        assert PackageJsonParser().parse("{not json") == []

    def test_empty_content(self):
        assert PackageJsonParser().parse("") == []
        assert PackageJsonParser().parse("   \n") == []

    def test_excessive_nesting(self):
        """Test that documents nested beyond the depth limit are rejected."""
        content = '{"dependencies": ' + "[" * 30 + "]" * 30 + "}"
        assert PackageJsonParser().parse(content) == []

    def test_non_object_document(self):
        assert PackageJsonParser().parse('["lodash"]') == []

    def test_dependency_cap(self):
        """Test that a single manifest contributes at most MAX_DEPENDENCIES entries."""
        deps = ", ".join(f'"pkg-{i}": "1.0.{i}"' for i in range(MAX_DEPENDENCIES + 10))
        groups = PackageJsonParser().parse('{"dependencies": {' + deps + "}}")

        assert len(groups[0].dependencies) == MAX_DEPENDENCIES


class TestPackageLockParser:
    """Test package-lock.json parser."""

    def test_parse_v3_packages(self):
        """Test lockfile v3 install paths, including nested and scoped packages."""
        content = """{
            "name": "app",
            "lockfileVersion": 3,
            "packages": {
                "": {"name": "app", "version": "1.0.0"},
                "node_modules/lodash": {"version": "4.17.21"},
                "node_modules/jest": {"version": "27.0.0", "dev": true},
                "node_modules/a/node_modules/@types/node": {"version": "18.0.0"}
            }
        }"""
        groups = by_type(PackageLockParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {"lodash": "4.17.21", "@types/node": "18.0.0"}
        assert groups[DependencyType.DEVELOPMENT] == {"jest": "27.0.0"}

    def test_parse_v1_dependencies(self):
        content = """{
            "lockfileVersion": 1,
            "dependencies": {
                "lodash": {"version": "4.17.21"},
                "mocha": {"version": "10.0.0", "dev": true}
            }
        }"""
        groups = by_type(PackageLockParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {"lodash": "4.17.21"}
        assert groups[DependencyType.DEVELOPMENT] == {"mocha": "10.0.0"}


class TestYarnLockParser:
    """Test yarn.lock parser."""

    def test_parse_classic_lockfile(self):
        content = (
            "# THIS IS AN AUTOGENERATED FILE. DO NOT EDIT THIS FILE DIRECTLY.\n"
            "# yarn lockfile v1\n"
            "\n"
            '"@babel/core@^7.0.0", "@babel/core@^7.1.0":\n'
            '  version "7.12.3"\n'
            '  resolved "https://registry.yarnpkg.com/@babel/core/-/core-7.12.3.tgz"\n'
            "\n"
            "lodash@^4.17.19:\n"
            '  version "4.17.21"\n'
        )
        groups = by_type(YarnLockParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {"@babel/core": "7.12.3", "lodash": "4.17.21"}

    def test_parse_berry_lockfile(self):
        content = (
            "__metadata:\n"
            "  version: 6\n"
            "\n"
            '"lodash@npm:^4.17.19":\n'
            "  version: 4.17.21\n"
            "  resolution: \"lodash@npm:4.17.21\"\n"
        )
        groups = by_type(YarnLockParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {"lodash": "4.17.21"}

    def test_first_version_wins(self):
        content = (
            "lodash@^3.0.0:\n"
            '  version "3.10.1"\n'
            "\n"
            "lodash@^4.0.0:\n"
            '  version "4.17.21"\n'
        )
        groups = by_type(YarnLockParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {"lodash": "3.10.1"}


class TestPnpmLockParser:
    """Test pnpm-lock.yaml parser."""

    def test_too_deep(self):
        depth = MAX_NESTING_DEPTH + 1
        content = "importers:\n  .:\n    dependencies:\n      lodash: 4.17.21\nextra: " + "[" * depth + "]" * depth + "\n"

        assert PnpmLockParser().parse(content) == []

    def test_parse_importers(self):
        """Test importer sections, peer suffixes and linked workspace packages."""
        content = (
            "lockfileVersion: '6.0'\n"
            "importers:\n"
            "  .:\n"
            "    dependencies:\n"
            "      react:\n"
            "        specifier: ^18.2.0\n"
            "        version: 18.2.0\n"
            "      local-pkg:\n"
            "        specifier: link:../local\n"
            "        version: link:../local\n"
            "    devDependencies:\n"
            "      typescript:\n"
            "        specifier: ^5.0.0\n"
            "        version: 5.0.4(@types/node@18.0.0)\n"
        )
        groups = by_type(PnpmLockParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {"react": "18.2.0"}
        assert groups[DependencyType.DEVELOPMENT] == {"typescript": "5.0.4"}

    def test_fallback_to_packages(self):
        content = (
            "lockfileVersion: '6.0'\n"
            "packages:\n"
            "  /lodash@4.17.21:\n"
            "    resolution: {integrity: sha512-abc}\n"
            "    dev: false\n"
            "  /@types/node@18.0.0:\n"
            "    resolution: {integrity: sha512-def}\n"
            "    dev: true\n"
        )
        groups = by_type(PnpmLockParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {"lodash": "4.17.21"}
        assert groups[DependencyType.DEVELOPMENT] == {"@types/node": "18.0.0"}

    def test_invalid_yaml(self):
        assert PnpmLockParser().parse("importers: [unclosed") == []


class TestRequirementsParser:
    """Test Python requirements.txt parser."""

    def test_parse_requirements(self):
        content = (
            "requests>=2.25.0\n"
            "Django==3.2.0\n"
            "flask[async]~=2.0.0\n"
            "# This is a comment\n"
            "\n"
            "-r base.txt\n"
            "-e git+https://github.com/user/repo.git#egg=my-package\n"
            "https://example.com/pkg-1.0.tar.gz\n"
            "./local/path\n"
            "numpy\n"
            "Pillow>=8.0,<9  # imaging\n"
        )
        groups = by_type(RequirementsParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {
            "requests": "2.25.0",
            "django": "3.2.0",
            "flask": "2.0.0",
            "numpy": "*",
            "pillow": "8.0,<9",
        }

    def test_environment_markers_dropped(self):
        groups = by_type(RequirementsParser().parse('typing-extensions>=4.0; python_version < "3.10"\n'))

        assert groups[DependencyType.PRODUCTION] == {"typing-extensions": "4.0"}

    def test_only_comments(self):
        assert RequirementsParser().parse("# nothing here\n# at all\n") == []


class TestPyProjectParser:
    """Test Python pyproject.toml parser."""

    def test_parse_pep621(self):
        content = """[project]
name = "test-project"
version = "1.0.0"
dependencies = [
    "requests>=2.25.0",
    "Django==3.2.0",
    "flask[dev]>=2.0.0; python_version >= '3.8'",
    "click",
]

[project.optional-dependencies]
test = [
    "pytest>=6.0",
]
"""
        groups = by_type(PyProjectParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {
            "requests": "2.25.0",
            "django": "3.2.0",
            "flask": "2.0.0",
            "click": "*",
        }
        assert groups[DependencyType.DEVELOPMENT] == {"pytest": "6.0"}

    def test_string_dependencies_ignored(self):
        """Test that a string where a list is expected yields nothing."""
        assert PyProjectParser().parse('[project]\ndependencies = "requests"\n') == []

        content = """[project]
dependencies = ["click>=8.0"]

[project.optional-dependencies]
test = "pytest"
"""
        groups = by_type(PyProjectParser().parse(content))

        assert groups == {DependencyType.PRODUCTION: {"click": "8.0"}}

    def test_parse_poetry(self):
        """Test Poetry dependencies, skipping the interpreter constraint."""
        content = """[tool.poetry.dependencies]
python = "^3.9"
requests = "^2.28"
fastapi = { version = "^0.100", extras = ["all"] }

[tool.poetry.group.dev.dependencies]
pytest = "^7.0"

[tool.poetry.group.docs.dependencies]
mkdocs = "^1.4"
"""
        groups = by_type(PyProjectParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {
            "requests": "^2.28",
            "fastapi": "^0.100",
            "mkdocs": "^1.4",
        }
        assert groups[DependencyType.DEVELOPMENT] == {"pytest": "^7.0"}

    def test_parse_legacy_poetry_dev_dependencies(self):
        content = """[tool.poetry.dev-dependencies]
black = "^23.1"
"""
        groups = by_type(PyProjectParser().parse(content))

        assert groups == {DependencyType.DEVELOPMENT: {"black": "^23.1"}}

    def test_invalid_toml(self):
        assert PyProjectParser().parse("[project\nname = ") == []


class TestPipfileParsers:
    """Test Pipfile and Pipfile.lock parsers."""

    def test_parse_pipfile(self):
        content = """[[source]]
url = "https://pypi.org/simple"

[packages]
requests = "*"
Django = {version = "==3.2.0"}

[dev-packages]
pytest = ">=6.0"
"""
        groups = by_type(PipfileParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {"requests": "*", "django": "==3.2.0"}
        assert groups[DependencyType.DEVELOPMENT] == {"pytest": ">=6.0"}

    def test_parse_pipfile_lock(self):
        content = """{
            "_meta": {"hash": {"sha256": "abc"}, "sources": [{"url": "https://pypi.org/simple"}]},
            "default": {
                "requests": {"hashes": ["sha256:1"], "version": "==2.31.0"},
                "mylib": {"git": "https://example.com/mylib.git", "ref": "abc123"}
            },
            "develop": {
                "pytest": {"version": "==7.4.0"}
            }
        }"""
        groups = by_type(PipfileLockParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {"requests": "==2.31.0"}
        assert groups[DependencyType.DEVELOPMENT] == {"pytest": "==7.4.0"}


class TestPoetryLockParser:
    """Test poetry.lock parser."""

    def test_parse_packages(self):
        content = """[[package]]
name = "requests"
version = "2.28.1"
category = "main"

[[package]]
name = "pytest"
version = "7.2.0"
category = "dev"

[metadata]
lock-version = "1.1"
"""
        groups = by_type(PoetryLockParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {"requests": "2.28.1"}
        assert groups[DependencyType.DEVELOPMENT] == {"pytest": "7.2.0"}


class TestGoParsers:
    """Test go.mod and go.sum parsers."""

    def test_parse_go_mod(self):
        """Test block and single-line requires, excluding indirect entries."""
        content = (
            "module example.com/app\n"
            "\n"
            "go 1.21\n"
            "\n"
            "require (\n"
            "\tgithub.com/gin-gonic/gin v1.9.1\n"
            "\tgolang.org/x/text v0.13.0 // indirect\n"
            ")\n"
            "\n"
            "require github.com/stretchr/testify v1.8.4\n"
        )
        groups = by_type(GoModParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {
            "github.com/gin-gonic/gin": "v1.9.1",
            "github.com/stretchr/testify": "v1.8.4",
        }

    def test_parse_go_sum(self):
        content = (
            "github.com/gin-gonic/gin v1.9.1 h1:abc=\n"
            "github.com/gin-gonic/gin v1.9.1/go.mod h1:def=\n"
            "golang.org/x/text v0.13.0/go.mod h1:ghi=\n"
            "golang.org/x/text v0.14.0 h1:jkl=\n"
        )
        groups = by_type(GoSumParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {
            "github.com/gin-gonic/gin": "v1.9.1",
            "golang.org/x/text": "v0.13.0",
        }


class TestRubyParsers:
    """Test Gemfile and Gemfile.lock parsers."""

    def test_parse_gemfile(self):
        content = (
            'source "https://rubygems.org"\n'
            "\n"
            'gem "rails", "~> 7.0.0"\n'
            "gem 'pg'\n"
            "\n"
            "group :development, :test do\n"
            '  gem "rspec-rails", "~> 6.0"\n'
            "end\n"
            "\n"
            'gem "puma", ">= 5.0"\n'
        )
        groups = by_type(GemfileParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {"rails": "~> 7.0.0", "pg": "*", "puma": ">= 5.0"}
        assert groups[DependencyType.DEVELOPMENT] == {"rspec-rails": "~> 6.0"}

    def test_parse_gemfile_lock(self):
        """Test that only four-space indented specs are collected."""
        content = (
            "GEM\n"
            "  remote: https://rubygems.org/\n"
            "  specs:\n"
            "    actioncable (7.0.4)\n"
            "      actionpack (= 7.0.4)\n"
            "    rake (13.0.6)\n"
            "\n"
            "PLATFORMS\n"
            "  ruby\n"
            "\n"
            "DEPENDENCIES\n"
            "  rails (~> 7.0.0)\n"
        )
        groups = by_type(GemfileLockParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {"actioncable": "7.0.4", "rake": "13.0.6"}


class TestPomXmlParser:
    """Test Maven pom.xml parser."""

    def test_parse_pom(self):
        """Test scopes, property placeholders and managed versions."""
        content = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <dependencies>
    <dependency>
      <groupId>org.springframework</groupId>
      <artifactId>spring-core</artifactId>
      <version>5.3.0</version>
    </dependency>
    <dependency>
      <groupId>junit</groupId>
      <artifactId>junit</artifactId>
      <version>4.13.2</version>
      <scope>test</scope>
    </dependency>
    <dependency>
      <groupId>com.example</groupId>
      <artifactId>internal</artifactId>
      <version>${project.version}</version>
    </dependency>
  </dependencies>
  <dependencyManagement>
    <dependencies>
      <dependency>
        <groupId>org.springframework</groupId>
        <artifactId>spring-core</artifactId>
        <version>6.0.0</version>
      </dependency>
      <dependency>
        <groupId>com.fasterxml.jackson.core</groupId>
        <artifactId>jackson-databind</artifactId>
        <version>2.15.0</version>
      </dependency>
    </dependencies>
  </dependencyManagement>
</project>
"""
        groups = by_type(PomXmlParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {
            "org.springframework:spring-core": "5.3.0",
            "com.fasterxml.jackson.core:jackson-databind": "2.15.0",
        }
        assert groups[DependencyType.TEST] == {"junit:junit": "4.13.2"}

    def test_entity_declarations_rejected(self):
        content = """<?xml version="1.0"?>
<!DOCTYPE project [<!ENTITY v "1.0.0">]>
<project>
  <dependencies>
    <dependency>
      <groupId>a</groupId>
      <artifactId>b</artifactId>
      <version>&v;</version>
    </dependency>
  </dependencies>
</project>
"""
        assert PomXmlParser().parse(content) == []

    def test_non_pom_root(self):
        assert PomXmlParser().parse("<settings><dependencies/></settings>") == []

    def test_malformed_xml(self):
        assert PomXmlParser().parse("<project><dependencies>") == []


class TestGradleParser:
    """Test Gradle build script parser."""

    def test_parse_groovy_and_kotlin_declarations(self):
        content = """
dependencies {
    implementation 'org.springframework:spring-core:5.3.0'
    api("com.google.guava:guava:31.1-jre")
    testImplementation "junit:junit:4.13.2"
    compileOnly 'org.projectlombok:lombok:1.18.24'
    implementation project(':core')
}
"""
        groups = by_type(GradleParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {
            "org.springframework:spring-core": "5.3.0",
            "com.google.guava:guava": "31.1-jre",
            "org.projectlombok:lombok": "1.18.24",
        }
        assert groups[DependencyType.TEST] == {"junit:junit": "4.13.2"}


class TestCargoParsers:
    """Test Cargo.toml and Cargo.lock parsers."""

    def test_parse_cargo_toml(self):
        content = """[package]
name = "app"
version = "0.1.0"

[dependencies]
serde = { version = "1.0", features = ["derive"] }
tokio = "1.28"
local = { path = "../local" }

[dev-dependencies]
criterion = "0.5"

[build-dependencies]
cc = "1.0"
"""
        groups = by_type(CargoTomlParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {"serde": "1.0", "tokio": "1.28", "local": "*"}
        assert groups[DependencyType.DEVELOPMENT] == {"criterion": "0.5"}
        assert groups[DependencyType.BUILD] == {"cc": "1.0"}

    def test_cargo_toml_too_deep(self):
        """Test that over-deep nesting rejects the whole manifest."""
        depth = MAX_NESTING_DEPTH + 1
        content = '[dependencies]\nserde = "1.0"\n\n[package.metadata]\nvalue = ' + "[" * depth + "]" * depth + "\n"

        assert CargoTomlParser().parse(content) == []

    def test_parse_cargo_lock(self):
        content = """version = 3

[[package]]
name = "serde"
version = "1.0.188"

[[package]]
name = "tokio"
version = "1.32.0"
dependencies = ["pin-project-lite"]
"""
        groups = by_type(CargoLockParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {"serde": "1.0.188", "tokio": "1.32.0"}


class TestDotnetProjectParser:
    """Test .NET project and packages.config parser."""

    def test_parse_csproj(self):
        content = """<Project Sdk="Microsoft.NET.Sdk">
  <PropertyGroup>
    <TargetFramework>net8.0</TargetFramework>
  </PropertyGroup>
  <ItemGroup>
    <PackageReference Include="Newtonsoft.Json" Version="13.0.1" />
    <PackageReference Include="Serilog">
      <Version>3.0.1</Version>
    </PackageReference>
    <PackageReference Include="Unversioned" />
  </ItemGroup>
</Project>
"""
        groups = by_type(DotnetProjectParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {"Newtonsoft.Json": "13.0.1", "Serilog": "3.0.1"}

    def test_parse_packages_config(self):
        content = """<?xml version="1.0" encoding="utf-8"?>
<packages>
  <package id="NUnit" version="3.13.3" targetFramework="net48" />
</packages>
"""
        groups = by_type(DotnetProjectParser().parse(content))

        assert groups[DependencyType.PRODUCTION] == {"NUnit": "3.13.3"}


class TestParserRegistry:
    """Test file name to parser lookup."""

    @pytest.mark.parametrize(
        "path, parser_class, ecosystem",
        [
            ("package.json", PackageJsonParser, Ecosystem.NODE),
            ("frontend/package-lock.json", PackageLockParser, Ecosystem.NODE),
            ("services/api/requirements-dev.txt", RequirementsParser, Ecosystem.PYTHON),
            ("Pipfile.lock", PipfileLockParser, Ecosystem.PYTHON),
            ("go.sum", GoSumParser, Ecosystem.GO),
            ("Gemfile.lock", GemfileLockParser, Ecosystem.RUBY),
            ("app/build.gradle.kts", GradleParser, Ecosystem.JAVA),
            ("gradle/deps.gradle", GradleParser, Ecosystem.JAVA),
            ("Cargo.lock", CargoLockParser, Ecosystem.RUST),
            ("src/App/App.csproj", DotnetProjectParser, Ecosystem.DOTNET),
        ],
    )
    def test_get_parser_for_file(self, path, parser_class, ecosystem):
        dependency_file = registry.get_parser_for_file(path)

        assert dependency_file is not None
        assert isinstance(dependency_file.parser, parser_class)
        assert dependency_file.ecosystem == ecosystem
        assert dependency_file.path == path

    def test_unrecognised_files(self):
        assert registry.get_parser_for_file("README.md") is None
        assert not registry.is_dependency_file("src/main.py")
        assert not registry.is_dependency_file("package.json.bak")

    def test_supported_ecosystems_in_canonical_order(self):
        assert registry.get_supported_ecosystems() == [ecosystem.value for ecosystem in Ecosystem]

    def test_supported_files(self):
        supported = registry.get_supported_files()

        assert "package.json" in supported["node"]
        assert "*.csproj" in supported["dotnet"]
