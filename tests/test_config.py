"""
test_config.py — Tests para el módulo de configuración.

Verificamos que:
1. Los valores por defecto reproducen el deploy original del blog
2. Las variables de entorno se resuelven
3. config.yaml se carga, incluida la sección social anidada
4. Las keys desconocidas se ignoran
"""

from pathlib import Path
from unittest.mock import patch

from jshblog.config import (
    AppConfig,
    DeployConfig,
    SiteConfig,
    load_config,
    _resolve_env_vars,
    _resolve_env_recursive,
)


class TestResolveEnvVars:
    """Tests para la resolución de variables de entorno."""

    def test_resuelve_variable_existente(self):
        """Debe reemplazar ${VAR} con el valor de la variable de entorno."""
        with patch.dict("os.environ", {"BLOG_DIR": "/home/jsh/blog"}):
            assert _resolve_env_vars("${BLOG_DIR}/public") == "/home/jsh/blog/public"

    def test_mantiene_variable_inexistente(self):
        """Si la variable no existe, debe mantener el placeholder."""
        assert _resolve_env_vars("${NO_EXISTE_JSH}") == "${NO_EXISTE_JSH}"

    def test_resuelve_multiples_variables(self):
        with patch.dict("os.environ", {"A": "1", "B": "2"}):
            assert _resolve_env_vars("${A}-${B}") == "1-2"

    def test_string_sin_variables(self):
        assert _resolve_env_vars("sin variables") == "sin variables"


class TestResolveEnvRecursive:

    def test_resuelve_en_dict_anidado(self):
        with patch.dict("os.environ", {"REMOTE": "upstream"}):
            datos = {"deploy": {"remote": "${REMOTE}"}}
            assert _resolve_env_recursive(datos)["deploy"]["remote"] == "upstream"

    def test_resuelve_en_lista(self):
        with patch.dict("os.environ", {"VAL": "ok"}):
            assert _resolve_env_recursive(["${VAL}", "fijo"]) == ["ok", "fijo"]

    def test_no_modifica_numeros(self):
        assert _resolve_env_recursive(42) == 42


class TestAppConfig:
    """Los defaults son los del deploy.sh original."""

    def test_deploy_por_defecto(self):
        deploy = DeployConfig()
        assert deploy.build_output == "public"
        assert deploy.draft_branch == "draft"
        assert deploy.publish_branch == "master"
        assert deploy.working_branch == "dev"
        assert deploy.remote == "origin"
        assert deploy.remote_ref == "master"
        assert deploy.commit_message == "Publish to master"

    def test_sitio_por_defecto(self):
        site = SiteConfig()
        assert site.title == "jsh"
        assert site.author == "Jonathon Herbert"
        assert site.social.twitter == "js_herbert"


class TestLoadConfig:
    """Tests para la función load_config."""

    def test_carga_sin_archivo(self, tmp_path):
        """Si no hay config.yaml, debe usar valores por defecto."""
        with patch("jshblog.config._find_config_dir", return_value=tmp_path):
            config = load_config()
        assert isinstance(config, AppConfig)
        assert config.deploy.publish_branch == "master"

    def test_carga_yaml(self, tmp_path):
        (tmp_path / "config.yaml").write_text(
            "site:\n"
            "  title: otro\n"
            "  social:\n"
            "    twitter: alguien\n"
            "deploy:\n"
            "  working_branch: main\n"
            "  build_output: dist\n",
            encoding="utf-8",
        )
        with patch("jshblog.config._find_config_dir", return_value=tmp_path):
            config = load_config()

        assert config.site.title == "otro"
        assert config.site.social.twitter == "alguien"
        assert config.site.author == "Jonathon Herbert"
        assert config.deploy.working_branch == "main"
        assert config.deploy.build_output == "dist"
        assert config.deploy.draft_branch == "draft"

    def test_ignora_keys_desconocidas(self, tmp_path):
        (tmp_path / "config.yaml").write_text(
            "deploy:\n  remote: origin\n  plugins: [sharp]\n", encoding="utf-8"
        )
        with patch("jshblog.config._find_config_dir", return_value=tmp_path):
            config = load_config()
        assert config.deploy.remote == "origin"
        assert not hasattr(config.deploy, "plugins")

    def test_repo_path_relativo_al_config(self, tmp_path):
        (tmp_path / "config.yaml").write_text(
            "deploy:\n  repo_path: blog\n", encoding="utf-8"
        )
        with patch("jshblog.config._find_config_dir", return_value=tmp_path):
            config = load_config()
        assert Path(config.deploy.repo_path) == tmp_path / "blog"

    def test_lee_variables_de_dotenv(self, tmp_path, monkeypatch):
        # setenv + delenv: monkeypatch la borra al terminar aunque la cargue dotenv
        monkeypatch.setenv("JSH_TEST_REPO", "")
        monkeypatch.delenv("JSH_TEST_REPO")
        (tmp_path / ".env").write_text(
            f"JSH_TEST_REPO={tmp_path / 'desde-env'}\n", encoding="utf-8"
        )
        (tmp_path / "config.yaml").write_text(
            "deploy:\n  repo_path: ${JSH_TEST_REPO}\n", encoding="utf-8"
        )
        with patch("jshblog.config._find_config_dir", return_value=tmp_path):
            config = load_config()
        assert Path(config.deploy.repo_path) == tmp_path / "desde-env"
