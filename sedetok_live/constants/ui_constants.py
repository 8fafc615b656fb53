"""Qt UI constants and user-facing copy."""

HOST_WINDOW_TITLE: str = "Sedetok Live - Consola del anfitrión"
PLAYER_WINDOW_TITLE: str = "Sedetok Live - Jugador"
PLAYER_URL_PLACEHOLDER: str = "http://<host-ip>:8000/"
LOBBY_REFRESH_INTERVAL_MS: int = 1000

HOST_BUTTON_IMPORT: str = "Importar preguntas"
HOST_BUTTON_CREATE: str = "Crear juego"
HOST_BUTTON_START: str = "Iniciar juego"
HOST_BUTTON_NEXT: str = "Siguiente pregunta"
HOST_BUTTON_FINISH: str = "Finalizar juego"
HOST_BUTTON_REPLAY: str = "Jugar de nuevo"
HOST_BUTTON_OPEN_PLAYER: str = "Abrir ventana de jugador"

IMPORT_DIALOG_TITLE: str = "Seleccionar archivo de preguntas"
IMPORT_FILE_FILTER: str = "Preguntas (*.txt);;Todos los archivos (*.*)"

LOBBY_DESCRIPTION: str = "Sala de espera: los jugadores se unen con el PIN."
LOBBY_EMPTY_STATE: str = "Aún no se ha unido ningún jugador."
LOBBY_COUNT_TEMPLATE: str = "{count} jugador(es) en la sala"
LOBBY_PIN_TEMPLATE: str = "PIN del juego: {pin}"

NO_QUESTIONS_MESSAGE: str = "Importa un archivo de preguntas antes de crear el juego."
NO_PLAYERS_MESSAGE: str = "Espera a que se una al menos un jugador."
GAME_CREATED_MESSAGE: str = "Juego creado exitosamente"
GAME_STARTED_MESSAGE: str = "¡Juego iniciado!"
GAME_FINISHED_MESSAGE: str = "¡Juego finalizado!"
GAME_REPLAYED_MESSAGE: str = "Juego recreado exitosamente"

JOIN_TITLE: str = "Unirse al juego"
JOIN_PIN_LABEL: str = "Código PIN"
JOIN_NAME_LABEL: str = "Tu nombre"
JOIN_BUTTON: str = "Unirse"
JOIN_WAITING_MESSAGE: str = "¡Estás dentro! Esperando a que el anfitrión inicie el juego…"
JOIN_JOINING_MESSAGE: str = "Uniéndote al juego…"

ERROR_NAME_REQUIRED: str = "Por favor ingresa tu nombre"
ERROR_PIN_REQUIRED: str = "Por favor ingresa el código PIN de 6 dígitos"
ERROR_GAME_NOT_FOUND: str = "No se encontró ningún juego con ese PIN. Verifica el código."
ERROR_GAME_FINISHED: str = "Este juego ya ha finalizado."
ERROR_HOST_ENDED: str = "Este juego ya finalizó"
ERROR_DUPLICATE_NAME: str = "Ya existe un jugador con ese nombre en este juego"
ERROR_JOIN_FAILED: str = "Error al unirse al juego. Intenta de nuevo."
ERROR_SUBMIT_FAILED: str = "No se pudo enviar tu respuesta. Revisa tu conexión."

PLAY_WAITING_MESSAGE: str = "Esperando a que inicie el juego..."
PLAY_LOADING_QUESTION: str = "Cargando pregunta..."
PLAY_CORRECT: str = "¡Correcto!"
PLAY_INCORRECT: str = "Incorrecto"
PLAY_TIMEOUT: str = "¡Se acabó el tiempo!"
PLAY_POINTS_TEMPLATE: str = "+{points} puntos"
PLAY_SENDING: str = "Enviando respuesta…"
PLAY_FINISHED_TITLE: str = "¡Juego Terminado!"
PLAY_RANK_TEMPLATE: str = "Tu posición: #{rank}"
PLAY_SCORE_TEMPLATE: str = "{score} puntos"
PLAY_SECONDS_TEMPLATE: str = "{seconds}s"
