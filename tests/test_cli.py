"""
Тесты для CLI
"""
import pytest

from cli import CertificateCLI
from gemcert.seed import SeedSet
from gemcert.service import CertificateService

REGISTER_ARGS = [
    "register",
    "--number", "GIE-2024-009999",
    "--gemstone-type", "Natural Diamond",
    "--carat-weight", "1.01",
    "--color", "E",
    "--clarity", "VS2",
    "--cut", "Excellent",
    "--polish", "Excellent",
    "--symmetry", "Very Good",
    "--fluorescence", "Faint",
    "--measurements", "6.41 x 6.45 x 3.98 mm",
    "--origin", "Natural",
]


class TestCertificateCLI:
    """Тесты для CertificateCLI"""

    @pytest.fixture
    def cli(self, service):
        """CLI поверх БД в памяти"""
        return CertificateCLI(service)

    def run(self, cli, argv):
        args = cli.build_parser().parse_args(argv)
        handlers = {
            'init-db': cli.init_database,
            'register': cli.register_certificate,
            'lookup': cli.lookup_certificate,
            'list': cli.list_certificates,
            'stats': cli.show_statistics,
        }
        handlers[args.command](args)

    def test_register(self, cli, capsys):
        """Регистрация с датой выдачи по умолчанию"""
        self.run(cli, REGISTER_ARGS)

        output = capsys.readouterr().out
        assert "✓ Сертификат успешно зарегистрирован:" in output
        assert "Номер: GIE-2024-009999" in output
        assert "Дата выдачи: " in output

    def test_register_duplicate(self, cli, capsys):
        """Повторная регистрация завершается с кодом 1"""
        self.run(cli, REGISTER_ARGS)
        capsys.readouterr()

        argv = list(REGISTER_ARGS)
        argv[argv.index("GIE-2024-009999")] = "gie-2024-009999"
        with pytest.raises(SystemExit) as exc_info:
            self.run(cli, argv)

        assert exc_info.value.code == 1
        assert "✗" in capsys.readouterr().out

    def test_register_blank_field(self, cli, capsys):
        """Пустое значение обязательного поля"""
        argv = list(REGISTER_ARGS)
        argv[argv.index("Natural Diamond")] = "  "

        with pytest.raises(SystemExit):
            self.run(cli, argv)

        assert "gemstoneType" in capsys.readouterr().out

    def test_lookup_found(self, cli, capsys):
        """Поиск образца в нижнем регистре"""
        self.run(cli, ["lookup", "gie-2024-001235"])

        output = capsys.readouterr().out
        assert "✓ Сертификат найден:" in output
        assert "Камень: Ruby" in output

    def test_lookup_not_found(self, cli, capsys):
        """Поиск несуществующего номера"""
        self.run(cli, ["lookup", "GIE-2024-000000"])

        assert "✗ Сертификат GIE-2024-000000 не найден" in capsys.readouterr().out

    def test_list_marks_samples(self, cli, capsys):
        """Образцы помечены в списке"""
        self.run(cli, REGISTER_ARGS)
        capsys.readouterr()

        self.run(cli, ["list"])

        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "Сертификаты реестра:"
        assert lines[1].strip().startswith("GIE-2024-009999")
        assert "(образец)" not in lines[1]
        assert all("(образец)" in line for line in lines[2:])
        assert len(lines) == 5

    def test_init_db_with_samples(self, cli, repository, capsys):
        """Перенос образцов в БД"""
        self.run(cli, ["init-db", "--with-samples"])

        output = capsys.readouterr().out
        assert "✓ Таблицы базы данных созданы" in output
        assert "✓ Образцов перенесено в БД: 3" in output
        assert repository.count() == 3

        self.run(cli, ["init-db", "--with-samples"])
        assert "✓ Образцов перенесено в БД: 0" in capsys.readouterr().out

    def test_stats(self, cli, capsys):
        """Статистика реестра"""
        self.run(cli, REGISTER_ARGS)
        capsys.readouterr()

        self.run(cli, ["stats"])

        output = capsys.readouterr().out
        assert "В базе данных: 1" in output
        assert "Образцов: 3" in output

    def test_stats_without_store(self, unavailable_repository, capsys):
        """Статистика при недоступной БД"""
        cli = CertificateCLI(CertificateService(unavailable_repository, SeedSet()))

        self.run(cli, ["stats"])

        assert "База данных: ✗ недоступна" in capsys.readouterr().out

    def test_no_command_prints_help(self, cli, capsys):
        """Без команды выводится справка"""
        cli.main([])

        assert "Реестр геммологических сертификатов" in capsys.readouterr().out
