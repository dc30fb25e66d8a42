# core: 底层能力（日志、HTTP 传输、Arrow 解码、通用工具），不引用 modules
