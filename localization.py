class Translator:
    def __init__(self) -> None:
        self.language = "en"
        self.translations = {
            "en": {},
            "pt-BR": {
                "Nothing to export": "Nada para exportar",
                "Exported to {path}": "Exportado para {path}",
                "Export failed: {message}": "Falha na exportação: {message}",
                "Imported {count} workouts": "{count} treinos importados",
                "All workouts already exist": "Todos os treinos já existem",
                "Invalid backup file": "Arquivo de backup inválido",
                "Backup found at {uri}": "Backup encontrado em {uri}",
                "No backup found": "Nenhum backup encontrado",
                "Restored workouts from backup": "Treinos restaurados do backup",
                "Nothing restored": "Nada foi restaurado",
                "Database already contains workouts": "O banco de dados já contém treinos",
                "Demo data inserted": "Dados de demonstração inseridos",
                "All workouts deleted": "Todos os treinos foram excluídos",
                "Migrated legacy workouts": "Treinos antigos migrados",
                "No legacy workouts to migrate": "Nenhum treino antigo para migrar",
                "Legacy migration failed": "Falha na migração dos treinos antigos",
                "Database compacted": "Banco de dados compactado",
                "Language: {language}": "Idioma: {language}",
                "Unsupported language: {language}": "Idioma não suportado: {language}",
                "Language set to {language}": "Idioma definido como {language}",
            },
        }

    def set_language(self, lang: str) -> None:
        self.language = lang

    def gettext(self, key: str, **params: object) -> str:
        text = self.translations.get(self.language, {}).get(key, key)
        return text.format(**params) if params else text

translator = Translator()
