"""
Seed script: registers the demo course tree.

Uso:
    python seed_courses.py

Idempotente: cursos são localizados pelo título.
"""
from app.database import session_scope
from app.models.course import Course
from app.services.catalog import CatalogStore

VIDEO = "https://www.youtube.com/embed/dQw4w9WgXcQ"

COURSES = [
    {
        "title": "Master en Desarrollo Digital Premium",
        "description": "Aprende a construir plataformas de clase mundial utilizando las tecnologías más modernas del mercado.",
        "thumbnail": "https://images.unsplash.com/photo-1611162617474-5b21e879e113?q=80&w=1000&auto=format&fit=crop",
        "modules": [
            {
                "title": "Introducción al Ecosistema",
                "lessons": [
                    {"title": "Bienvenida al Master", "duration": "05:20",
                     "description": "Bienvenida al programa y metodología de aprendizaje."},
                    {"title": "Configuración del entorno PRO", "duration": "12:45",
                     "description": "Terminal, editor de código y herramientas de depuración."},
                ],
            },
            {
                "title": "Arquitectura y Diseño",
                "lessons": [
                    {"title": "Diseño de bases de datos escalables", "duration": "45:00",
                     "description": "Esquemas relacionales y no relacionales, optimización de queries."},
                    {"title": "APIs y Microservicios Modernos", "duration": "38:15",
                     "description": "REST vs GraphQL y servicios independientes."},
                ],
            },
        ],
    },
]

with session_scope() as db:
    catalog = CatalogStore(db)
    for c in COURSES:
        course = db.query(Course).filter(Course.title == c["title"]).first()
        if course:
            print(f"  Exists:  {c['title']}")
            continue

        course = catalog.create_course(c["title"], description=c["description"], thumbnail=c["thumbnail"])
        print(f"  Created: {c['title']}")

        # now() is fixed per transaction; ids keep the listed order as tie-breaker
        for m in c["modules"]:
            module = catalog.create_module(course, title=m["title"])
            for lesson in m["lessons"]:
                catalog.create_lesson(module, video_url=VIDEO, **lesson)
                print(f"    + {m['title']} / {lesson['title']}")

print("\nDone.")
